# translation/loader.py
import importlib
from typing import Optional

from bionicbook.config import load_raw_config, resolve_env
from bionicbook.exceptions import ConfigError
from bionicbook.translation.base import BaseTranslator
from bionicbook.translation.router import TranslatorRouter


def load_translator(
    target_language: str,
    config_path:     Optional[str] = None,
) -> BaseTranslator:
    """
    Construye el traductor declarado en el YAML de configuración.

    translator:                      # un único traductor
      factory: "mi_paquete.traductores:build"
      options:
        api_key: ${MI_API_KEY}

    translators:                     # o varios, en orden de prioridad (failover)
      - factory: "..."
      - factory: "..."

    La fábrica se invoca como factory(target_language=..., **options) y debe
    devolver un BaseTranslator.
    """
    raw = load_raw_config(config_path)

    entries = raw.get("translators")
    if entries is None and raw.get("translator") is not None:
        entries = [raw["translator"]]

    if not entries:
        raise ConfigError(
            "Ningún traductor configurado. Declara 'translator.factory' en "
            "~/.bionicbook/config.yaml para activar la traducción."
        )

    translators = [_build_translator(entry, target_language) for entry in entries]
    if len(translators) == 1:
        return translators[0]
    return TranslatorRouter(translators)


def _build_translator(entry: dict, target_language: str) -> BaseTranslator:
    if not isinstance(entry, dict) or "factory" not in entry:
        raise ConfigError(f"Entrada de traductor inválida (falta 'factory'): {entry!r}")

    factory = import_factory(entry["factory"])
    options = {
        key: resolve_env(value)
        for key, value in (entry.get("options") or {}).items()
    }

    translator = factory(target_language=target_language, **options)
    if not isinstance(translator, BaseTranslator):
        raise ConfigError(
            f"'{entry['factory']}' devolvió {type(translator).__name__}, "
            f"se esperaba un BaseTranslator"
        )
    return translator


def import_factory(path: str):
    """Resuelve 'paquete.modulo:atributo' a un callable."""
    module_name, sep, attr = path.partition(":")
    if not sep or not module_name or not attr:
        raise ConfigError(f"Ruta de fábrica inválida '{path}'. Formato: 'modulo:atributo'")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigError(f"No se pudo importar '{module_name}': {e}") from e

    try:
        factory = getattr(module, attr)
    except AttributeError as e:
        raise ConfigError(f"'{module_name}' no define '{attr}'") from e

    if not callable(factory):
        raise ConfigError(f"'{path}' no es invocable")
    return factory
