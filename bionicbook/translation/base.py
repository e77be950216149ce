# translation/base.py
from abc import ABC, abstractmethod


class BaseTranslator(ABC):
    """
    Contrato que deben cumplir todos los traductores.
    El orquestador solo habla con esta interfaz; la implementación real
    (API, modelo local, etc.) la aporta el usuario.
    """

    @abstractmethod
    async def translate(self, text: str, notes: str) -> str:
        """
        Traduce un chunk. Debe poder llamarse una vez por chunk,
        independientemente del resto.
        Lanza TranslationError (u otra excepción) si falla; el orquestador
        marca el chunk como FAILED y sigue con el siguiente.
        """
        ...

    @property
    def name(self) -> str:
        """Identificador para logs."""
        return type(self).__name__
