"""clipguard — fast shape-based classification of clipboard text."""

from .types import Category, PatternId, Pattern, JwtSegments, ClassificationResult
from .patterns import (
    PATTERNS, get_pattern, evaluate, scan,
    matches_jwt, extract_jwt,
    matches_json, extract_json,
    matches_hex_color, extract_hex_colors,
    matches_api_key, extract_api_keys,
    matches_credit_card, extract_credit_cards,
)
from .classifier import Classifier, ClassifierConfig, ClassificationReport
from .security import SecurityGate, GateConfig, SecurityVerdict, SensitiveDataType
from .transformer import (
    ContentTransformer, TransformerConfig, ContentType, ContentDetection,
    TransformationResult, JwtPayload, HexColor,
)
from .config import (
    ConfigError, load_config, load_from_yaml,
    create_classifier, create_gate, create_transformer,
)

__all__ = [
    "Category", "PatternId", "Pattern", "JwtSegments", "ClassificationResult",
    "PATTERNS", "get_pattern", "evaluate", "scan",
    "matches_jwt", "extract_jwt",
    "matches_json", "extract_json",
    "matches_hex_color", "extract_hex_colors",
    "matches_api_key", "extract_api_keys",
    "matches_credit_card", "extract_credit_cards",
    "Classifier", "ClassifierConfig", "ClassificationReport",
    "SecurityGate", "GateConfig", "SecurityVerdict", "SensitiveDataType",
    "ContentTransformer", "TransformerConfig", "ContentType", "ContentDetection",
    "TransformationResult", "JwtPayload", "HexColor",
    "ConfigError", "load_config", "load_from_yaml",
    "create_classifier", "create_gate", "create_transformer",
]
__version__ = "0.1.0"
