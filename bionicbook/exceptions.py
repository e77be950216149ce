# bionicbook/exceptions.py


class BionicBookError(Exception):
    """Raíz de todas las excepciones del paquete."""
    pass


class ConfigError(BionicBookError):
    """Configuración inválida. Se rechaza antes de ejecutar ninguna etapa."""
    pass


class ExtractionError(BionicBookError):
    """El documento no pudo leerse o convertirse a texto plano."""
    pass


class TranslationError(BionicBookError):
    """
    Fallo al traducir un chunk. No es fatal para el run:
    el orquestador marca el chunk FAILED y continúa.

    retryable=False indica un error de contenido (el mismo chunk fallaría
    en cualquier traductor), así que el TranslatorRouter no hace failover.
    """

    def __init__(self, message: str, retryable: bool = True):
        super().__init__(message)
        self.retryable = retryable


class ValidationWarning(BionicBookError):
    """La traducción no pasó la validación. El pipeline sigue con el mejor texto disponible."""
    pass


class PackagingError(BionicBookError):
    """No se pudo generar el artefacto final."""
    pass
