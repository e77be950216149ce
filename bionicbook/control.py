# bionicbook/control.py
import asyncio


class RunToken:
    """
    Token cooperativo de pausa/cancelación.

    Lo comparten el PipelineController y el TranslationOrchestrator de un
    mismo run. Nadie interrumpe nada de forma preventiva: cada componente
    llama a checkpoint() en sus puntos de suspensión (entre chunks, entre
    etapas) y decide qué hacer con el resultado.
    """

    def __init__(self):
        self._running   = asyncio.Event()
        self._running.set()
        self._cancelled = False

    @property
    def paused(self) -> bool:
        return not self._running.is_set() and not self._cancelled

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def pause(self) -> None:
        if not self._cancelled:
            self._running.clear()

    def resume(self) -> None:
        self._running.set()

    def cancel(self) -> None:
        self._cancelled = True
        # Despierta a quien esté esperando en pausa para que vea la cancelación
        self._running.set()

    async def checkpoint(self) -> bool:
        """
        Espera mientras el token esté en pausa.
        Devuelve False si el run fue cancelado y debe terminar.
        """
        if not self._running.is_set():
            await self._running.wait()
        return not self._cancelled
