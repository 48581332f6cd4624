"""
Conversion configuration.

All conversion options and their defaults live here; mapping code reads them
from a ConversionConfig and never invents its own. The output suffix and the
target directory are CLI concerns and are not part of this module.
"""

import os
from dataclasses import dataclass, fields
from enum import Enum
from pathlib import Path

import yaml

SUPPORTED_UBL_VERSIONS = ("2.1", "2.2", "2.3", "2.4")

DEFAULT_VAT_SCHEME = "VAT"
DEFAULT_CUSTOMIZATION_ID = (
    "urn:cen.eu:en16931:2017#compliant#urn:fdc:peppol.eu:2017:poacc:billing:3.0"
)
DEFAULT_PROFILE_ID = "urn:fdc:peppol.eu:2017:poacc:billing:01:1.0"
DEFAULT_CARD_ACCOUNT_NETWORK_ID = "mapped-from-cii"
DEFAULT_ORDER_REF_ID = ""


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""

    pass


class UnsupportedUBLVersionError(ConfigValidationError):
    """Raised when the requested UBL version has no mapping."""

    def __init__(self, version: str):
        super().__init__(
            f"Unsupported UBL version '{version}' "
            f"(supported: {', '.join(SUPPORTED_UBL_VERSIONS)})"
        )
        self.version = version


class CreationMode(str, Enum):
    """Which UBL document type to create."""

    AUTOMATIC = "automatic"
    INVOICE = "invoice"
    CREDIT_NOTE = "creditnote"


class BaseQuantityPolicy(str, Enum):
    """How the price base quantity (BT-149) is written.

    SOURCE copies the quantity found in the CII price; ONE always writes 1,
    which is what some receiving systems expect.
    """

    SOURCE = "source"
    ONE = "one"


@dataclass(frozen=True)
class ConversionConfig:
    """Options for a single CII → UBL conversion.

    Immutable so one instance can be shared by any number of conversions.
    """

    ubl_version: str = "2.1"
    creation_mode: CreationMode = CreationMode.AUTOMATIC
    vat_scheme: str = DEFAULT_VAT_SCHEME
    customization_id: str = DEFAULT_CUSTOMIZATION_ID
    profile_id: str = DEFAULT_PROFILE_ID
    card_account_network_id: str = DEFAULT_CARD_ACCOUNT_NETWORK_ID
    default_order_ref_id: str = DEFAULT_ORDER_REF_ID
    swap_quantity_sign_if_needed: bool = True
    base_quantity_policy: BaseQuantityPolicy = BaseQuantityPolicy.SOURCE
    # Historical fallback: derive invoice/credit note from the payable amount sign
    use_payable_amount_fallback: bool = True
    # Configured customization/profile IDs replace the ones in the source
    override_document_context: bool = False
    emit_ubl_version_id: bool = False

    def validate(self) -> list[str]:
        """Validate configuration completeness and consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors: list[str] = []

        if self.ubl_version not in SUPPORTED_UBL_VERSIONS:
            errors.append(f"ubl_version '{self.ubl_version}' is not supported")
        if not isinstance(self.creation_mode, CreationMode):
            errors.append(f"creation_mode '{self.creation_mode}' is not supported")
        if not isinstance(self.base_quantity_policy, BaseQuantityPolicy):
            errors.append(
                f"base_quantity_policy '{self.base_quantity_policy}' is not supported"
            )
        if not self.vat_scheme:
            errors.append("vat_scheme is required")
        if not self.customization_id:
            errors.append("customization_id is required")
        if not self.card_account_network_id:
            errors.append("card_account_network_id is required")

        return errors


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise ConfigValidationError(f"Invalid boolean value '{value}'")


def _parse_enum(enum_type: type[Enum], value, key: str):
    if isinstance(value, enum_type):
        return value
    try:
        return enum_type(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(member.value for member in enum_type)
        raise ConfigValidationError(
            f"Invalid value '{value}' for {key} (allowed: {allowed})"
        ) from None


# Environment variable → config field
ENV_OVERRIDES = {
    "CII2UBL_UBL_VERSION": "ubl_version",
    "CII2UBL_MODE": "creation_mode",
    "CII2UBL_VAT_SCHEME": "vat_scheme",
    "CII2UBL_CUSTOMIZATION_ID": "customization_id",
    "CII2UBL_PROFILE_ID": "profile_id",
    "CII2UBL_CARD_ACCOUNT_NETWORK_ID": "card_account_network_id",
    "CII2UBL_DEFAULT_ORDER_REF_ID": "default_order_ref_id",
    "CII2UBL_SWAP_QUANTITY_SIGN": "swap_quantity_sign_if_needed",
    "CII2UBL_BASE_QUANTITY": "base_quantity_policy",
    "CII2UBL_PAYABLE_AMOUNT_FALLBACK": "use_payable_amount_fallback",
    "CII2UBL_OVERRIDE_DOCUMENT_CONTEXT": "override_document_context",
    "CII2UBL_EMIT_UBL_VERSION_ID": "emit_ubl_version_id",
}


def config_from_mapping(data: dict) -> ConversionConfig:
    """Build a ConversionConfig from plain values (YAML data, CLI overrides).

    Unknown keys are rejected; string values are coerced to the field types.
    """
    known = {f.name for f in fields(ConversionConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigValidationError(f"Unknown configuration keys: {', '.join(unknown)}")

    values = {}
    for key, value in data.items():
        if value is None:
            continue
        if key == "creation_mode":
            value = _parse_enum(CreationMode, value, key)
        elif key == "base_quantity_policy":
            value = _parse_enum(BaseQuantityPolicy, value, key)
        elif key in (
            "swap_quantity_sign_if_needed",
            "use_payable_amount_fallback",
            "override_document_context",
            "emit_ubl_version_id",
        ):
            if isinstance(value, str):
                value = _parse_bool(value)
            else:
                value = bool(value)
        else:
            value = str(value)
        values[key] = value

    return ConversionConfig(**values)


def load_config(config_path: Path | None = None) -> ConversionConfig:
    """
    Load configuration from a YAML file.

    The file holds a ``conversion`` mapping whose keys are the
    ConversionConfig field names. A missing file yields the defaults.

    Environment variables can override config values:
    - CII2UBL_UBL_VERSION
    - CII2UBL_MODE (automatic/invoice/creditnote)
    - CII2UBL_VAT_SCHEME
    - CII2UBL_CUSTOMIZATION_ID
    - CII2UBL_PROFILE_ID
    - CII2UBL_CARD_ACCOUNT_NETWORK_ID
    - CII2UBL_DEFAULT_ORDER_REF_ID
    - CII2UBL_SWAP_QUANTITY_SIGN (true/false)
    - CII2UBL_BASE_QUANTITY (source/one)
    - CII2UBL_PAYABLE_AMOUNT_FALLBACK (true/false)
    - CII2UBL_OVERRIDE_DOCUMENT_CONTEXT (true/false)
    - CII2UBL_EMIT_UBL_VERSION_ID (true/false)
    """
    if config_path is not None and config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    else:
        data = {}

    if not isinstance(data, dict):
        raise ConfigValidationError(f"{config_path}: top level must be a mapping")

    conversion_data = dict(data.get("conversion") or {})

    for env_name, key in ENV_OVERRIDES.items():
        env_value = os.environ.get(env_name)
        if env_value:
            conversion_data[key] = env_value

    config = config_from_mapping(conversion_data)

    errors = config.validate()
    if errors:
        raise ConfigValidationError("; ".join(errors))

    return config


def create_default_config(config_path: Path) -> None:
    """Create a default configuration file."""
    default_config = f"""# CII → UBL conversion settings
#
# Values can be overridden with CII2UBL_* environment variables
# and with command line options.

conversion:
  ubl_version: "2.1"                     # 2.1, 2.2, 2.3 or 2.4
  creation_mode: automatic               # automatic, invoice or creditnote
  vat_scheme: "{DEFAULT_VAT_SCHEME}"
  customization_id: "{DEFAULT_CUSTOMIZATION_ID}"
  profile_id: "{DEFAULT_PROFILE_ID}"
  card_account_network_id: "{DEFAULT_CARD_ACCOUNT_NETWORK_ID}"
  default_order_ref_id: ""
  swap_quantity_sign_if_needed: true
  base_quantity_policy: source           # source or one
  use_payable_amount_fallback: true      # type code first, payable amount sign second
  override_document_context: false       # replace BT-23/BT-24 found in the source
  emit_ubl_version_id: false
"""
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(default_config, encoding="utf-8")
