"""Taxonomía de errores de la calculadora.

Todas las excepciones heredan de `CalculatorError`: el orquestador las captura
en un único punto y las convierte en `show_error(str(exc))`. Los detalles de
diagnóstico (status, cuerpos crudos, texto sin parsear) viajan como atributos
para el log, no en el mensaje que ve el usuario.
"""

from __future__ import annotations


class CalculatorError(Exception):
    """Error base; su mensaje es apto para mostrarse en la línea de estado."""


class ValidationError(CalculatorError):
    """Entrada vacía o solo espacios: corta antes de cualquier llamada de red."""

    def __init__(self, message: str = "Escribe una operación primero.") -> None:
        super().__init__(message)


class TransportError(CalculatorError):
    """Fallo de red (DNS, conexión, timeout configurado)."""

    def __init__(self, target: str, cause: Exception) -> None:
        super().__init__(f"No se pudo contactar {target}: {cause}")
        self.target = target
        self.cause = cause


class CredentialError(CalculatorError):
    """El endpoint de claves falló o no devolvió una `apiKey` utilizable."""


class EvaluationError(CalculatorError):
    """Base de los errores del endpoint de chat-completion."""


class EvaluationHTTPError(EvaluationError):
    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"Error HTTP {status_code} del proveedor de IA.")
        self.status_code = status_code
        self.body = body


class EvaluationEnvelopeError(EvaluationError):
    """La respuesta no tiene la forma `{choices: [{message: {...}}]}`."""


class EvaluationEmptyError(EvaluationError):
    def __init__(self, message: str = "No se encontró el texto de salida en la respuesta.") -> None:
        super().__init__(message)


class NormalizationError(CalculatorError):
    """Base de los errores al interpretar la salida del modelo."""


class ParseError(NormalizationError):
    def __init__(self, raw_text: str, excerpt: str) -> None:
        super().__init__(f"La IA no regresó un JSON limpio/parseable: {excerpt!r}")
        self.raw_text = raw_text


class SchemaError(NormalizationError):
    def __init__(
        self,
        message: str = "El JSON no contiene los campos 'resultado' y 'latex' como se esperaba.",
    ) -> None:
        super().__init__(message)
