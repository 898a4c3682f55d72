"""Message catalogs, one per supported locale.

Keys prefixed with ``validation.`` or matching a pydantic error type are used
for field errors; placeholders are filled from the error context.
"""

from collections.abc import Mapping
from types import MappingProxyType

_EN = {
    "validation.failed": "Validation failed",
    "missing": "This field is required",
    "string_type": "Must be a text value",
    "string_too_short": "Must have at least {min_length} characters",
    "string_too_long": "Must have at most {max_length} characters",
    "int_parsing": "Must be a whole number",
    "int_type": "Must be a whole number",
    "greater_than_equal": "Must be greater than or equal to {ge}",
    "less_than_equal": "Must be less than or equal to {le}",
    "enum": "Must be one of {expected}",
    "json_invalid": "Malformed JSON body",
    "model_attributes_type": "Request body must be an object",
    "user.email.invalid": "Invalid email address",
    "user.email.exists": "Email already registered",
    "user.created": "User created successfully",
    "user.updated": "User updated successfully",
    "user.deleted": "User deleted successfully",
    "user.not_found": "User {id} not found",
    "company.not_found": "Company {company_id} does not exist",
    "auth.unauthorized": "You are not authorized to perform this action",
    "error.not_found": "Resource not found",
    "error.internal": "Internal server error",
}

_PT_BR = {
    "validation.failed": "Falha na validação",
    "missing": "Campo obrigatório",
    "string_type": "Deve ser um texto",
    "string_too_short": "Deve ter pelo menos {min_length} caracteres",
    "string_too_long": "Deve ter no máximo {max_length} caracteres",
    "int_parsing": "Deve ser um número inteiro",
    "int_type": "Deve ser um número inteiro",
    "greater_than_equal": "Deve ser maior ou igual a {ge}",
    "less_than_equal": "Deve ser menor ou igual a {le}",
    "enum": "Deve ser um de {expected}",
    "json_invalid": "Corpo JSON malformado",
    "model_attributes_type": "O corpo da requisição deve ser um objeto",
    "user.email.invalid": "E-mail inválido",
    "user.email.exists": "E-mail já cadastrado",
    "user.created": "Usuário criado com sucesso",
    "user.updated": "Usuário atualizado com sucesso",
    "user.deleted": "Usuário removido com sucesso",
    "user.not_found": "Usuário {id} não encontrado",
    "company.not_found": "Empresa {company_id} não existe",
    "auth.unauthorized": "Você não tem permissão para realizar esta ação",
    "error.not_found": "Recurso não encontrado",
    "error.internal": "Erro interno do servidor",
}

CATALOGS: Mapping[str, Mapping[str, str]] = MappingProxyType(
    {
        "en": MappingProxyType(_EN),
        "pt_BR": MappingProxyType(_PT_BR),
    }
)
