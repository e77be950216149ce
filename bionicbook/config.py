# bionicbook/config.py
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Optional

import yaml

from bionicbook.exceptions import ConfigError

_DEFAULT_CONFIG_PATH = Path.home() / ".bionicbook" / "config.yaml"

_OUTPUT_FORMATS = {"epub", "html", "txt"}


# ------------------------------------------------------------------
# Value objects
# ------------------------------------------------------------------

@dataclass(frozen=True)
class Margins:
    left:   int = 20
    right:  int = 20
    top:    int = 20
    bottom: int = 20

    def validate(self) -> None:
        for side in ("left", "right", "top", "bottom"):
            value = getattr(self, side)
            _check_int(f"margins.{side}", value)
            if value < 0:
                raise ConfigError(f"El margen '{side}' no puede ser negativo")


@dataclass(frozen=True)
class BionicConfig:
    """
    Ajustes tipográficos del renderizado bionic.
    Inmutable: cada cambio del usuario construye uno nuevo (ver with_changes).
    """
    bold_percentage:   int   = 40
    font_size:         int   = 16
    line_height:       float = 1.6
    paragraph_spacing: float = 1.5
    font_family:       str   = "Inter"
    margins:           Margins = field(default_factory=Margins)

    def validate(self) -> None:
        _check_int("bold_percentage", self.bold_percentage)
        if not 0 <= self.bold_percentage <= 100:
            raise ConfigError(
                f"bold_percentage fuera de rango [0, 100]: {self.bold_percentage}"
            )
        _check_int("font_size", self.font_size)
        if self.font_size <= 0:
            raise ConfigError(f"font_size debe ser positivo: {self.font_size}")
        _check_number("line_height", self.line_height)
        if self.line_height <= 0:
            raise ConfigError(f"line_height debe ser positivo: {self.line_height}")
        _check_number("paragraph_spacing", self.paragraph_spacing)
        if self.paragraph_spacing < 0:
            raise ConfigError(
                f"paragraph_spacing no puede ser negativo: {self.paragraph_spacing}"
            )
        _check_str("font_family", self.font_family)
        if not self.font_family.strip():
            raise ConfigError("font_family no puede estar vacío")
        if not isinstance(self.margins, Margins):
            raise ConfigError(f"margins debe ser un mapeo, recibido: {self.margins!r}")
        self.margins.validate()

    def with_changes(self, **changes) -> "BionicConfig":
        return replace(self, **changes)


@dataclass(frozen=True)
class ProcessingConfig:
    enable_translation:   bool  = False
    target_language:      str   = "de"
    translation_notes:    str   = ""
    chunk_size:           int   = 1000
    bionic:               BionicConfig = field(default_factory=BionicConfig)
    fail_on_chunk_errors: bool  = False
    request_interval:     float = 0.0
    timeout_seconds:      Optional[float] = None
    output_format:        str   = "epub"
    # Cada chunk traducido va precedido de su texto original
    include_original:     bool  = False

    def validate(self) -> None:
        """Lanza ConfigError ante el primer valor inválido."""
        for flag in ("enable_translation", "fail_on_chunk_errors", "include_original"):
            _check_bool(flag, getattr(self, flag))
        _check_int("chunk_size", self.chunk_size)
        if self.chunk_size < 1:
            raise ConfigError(f"chunk_size debe ser >= 1: {self.chunk_size}")
        _check_str("target_language", self.target_language)
        _check_str("translation_notes", self.translation_notes)
        if self.enable_translation and not self.target_language.strip():
            raise ConfigError("target_language es obligatorio si la traducción está activa")
        _check_number("request_interval", self.request_interval)
        if self.request_interval < 0:
            raise ConfigError(
                f"request_interval no puede ser negativo: {self.request_interval}"
            )
        if self.timeout_seconds is not None:
            _check_number("timeout_seconds", self.timeout_seconds)
            if self.timeout_seconds <= 0:
                raise ConfigError(
                    f"timeout_seconds debe ser positivo: {self.timeout_seconds}"
                )
        _check_str("output_format", self.output_format)
        if self.output_format not in _OUTPUT_FORMATS:
            raise ConfigError(
                f"Formato de salida '{self.output_format}' no soportado. "
                f"Formatos disponibles: {', '.join(sorted(_OUTPUT_FORMATS))}"
            )
        if not isinstance(self.bionic, BionicConfig):
            raise ConfigError(f"bionic debe ser un mapeo, recibido: {self.bionic!r}")
        self.bionic.validate()

    def with_changes(self, **changes) -> "ProcessingConfig":
        return replace(self, **changes)


# ------------------------------------------------------------------
# Carga desde YAML
# ------------------------------------------------------------------

def resolve_config_path(config_path: Optional[str] = None) -> Path:
    return Path(
        config_path
        or os.environ.get("BIONICBOOK_CONFIG_PATH")
        or _DEFAULT_CONFIG_PATH
    )


def load_raw_config(config_path: Optional[str] = None) -> dict:
    """
    Lee el YAML de configuración. Si la ruta es la de por defecto y no
    existe, devuelve {}; una ruta explícita que no existe es un error.
    """
    path = resolve_config_path(config_path)

    if not path.exists():
        if config_path:
            raise FileNotFoundError(f"Config no encontrada en {path}")
        return {}

    with path.open(encoding="utf-8") as f:
        try:
            raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"YAML inválido en {path}: {e}") from e

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"La raíz de {path} debe ser un mapeo")
    return raw


def load_processing_config(
    config_path: Optional[str] = None,
    **overrides: Any,
) -> ProcessingConfig:
    """
    Construye un ProcessingConfig desde YAML + overrides (los de la CLI).
    Los overrides con valor None se ignoran. Los campos de BionicConfig
    se pasan como overrides con el prefijo 'bionic_' (ej: bionic_bold_percentage).
    """
    raw = load_raw_config(config_path)
    config = processing_config_from_dict(raw.get("processing"))

    bionic_overrides = {
        key[len("bionic_"):]: value
        for key, value in overrides.items()
        if key.startswith("bionic_") and value is not None
    }
    plain_overrides = {
        key: value
        for key, value in overrides.items()
        if not key.startswith("bionic_") and value is not None
    }

    if bionic_overrides:
        plain_overrides["bionic"] = config.bionic.with_changes(**bionic_overrides)

    config = config.with_changes(**plain_overrides)
    config.validate()
    return config


def processing_config_from_dict(data: Optional[dict]) -> ProcessingConfig:
    data = _mapping("processing", data)
    bionic_data = dict(_mapping("processing.bionic", data.get("bionic")))
    margins_data = _mapping("processing.bionic.margins", bionic_data.pop("margins", None))

    try:
        margins = Margins(**margins_data)
        bionic = BionicConfig(margins=margins, **bionic_data)
        fields = {k: v for k, v in data.items() if k != "bionic"}
        return ProcessingConfig(bionic=bionic, **fields)
    except TypeError as e:
        # Claves desconocidas en el YAML
        raise ConfigError(f"Opción de configuración desconocida: {e}") from e


def _mapping(name: str, value: Any) -> dict:
    """Una sección ausente o vacía del YAML es un mapeo vacío."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"La sección '{name}' debe ser un mapeo, recibido: {value!r}")
    return value


# ------------------------------------------------------------------
# Chequeos de tipo: el YAML puede traer cualquier cosa
# ------------------------------------------------------------------

def _check_int(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{name} debe ser un entero, recibido: {value!r}")


def _check_number(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{name} debe ser un número, recibido: {value!r}")


def _check_bool(name: str, value: Any) -> None:
    if not isinstance(value, bool):
        raise ConfigError(f"{name} debe ser true o false, recibido: {value!r}")


def _check_str(name: str, value: Any) -> None:
    if not isinstance(value, str):
        raise ConfigError(f"{name} debe ser texto, recibido: {value!r}")


def resolve_env(value: Any) -> Any:
    """Expande ${VAR_NAME} desde el entorno. Otros valores pasan sin cambios."""
    if not isinstance(value, str) or not value.startswith("${"):
        return value
    var_name = value.strip("${}").strip()
    return os.environ.get(var_name)
