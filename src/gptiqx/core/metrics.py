"""Metric definitions shown in the "How is it calculated?" explainers."""

import logging
import os
from dataclasses import dataclass
from typing import Dict, List, Any, Optional

import yaml

from .constants import FileConstants

logger = logging.getLogger(__name__)

METRIC_NAMES = ("UserIQ", "GPTIQ", "ConversationIQ")


@dataclass
class MetricFactor:
    name: str
    weight: str
    description: str


@dataclass
class MetricDefinition:
    title: str
    definition: str
    methodology: str
    factors: List[MetricFactor]


def _default_definitions() -> Dict[str, Any]:
    """Built-in definitions used when no config file is available."""
    return {
        "UserIQ": {
            "definition": "Measures the quality and effectiveness of user prompts in driving productive AI interactions.",
            "methodology": "Composite score (0-100) calculated from three weighted factors analyzing prompt "
                           "construction, inquiry depth, and originality.",
            "factors": [
                {"name": "Clarity", "weight": "40%",
                 "description": "Structure, specificity, and unambiguous communication of intent"},
                {"name": "Depth", "weight": "35%",
                 "description": "Thoughtfulness, contextual richness, and multi-layered questioning"},
                {"name": "Creativity", "weight": "25%",
                 "description": "Originality, unconventional approaches, and innovative problem framing"},
            ],
        },
        "GPTIQ": {
            "definition": "Evaluates the AI's response quality in addressing user needs and maintaining engagement.",
            "methodology": "Composite score (0-100) derived from response analysis across clarity, "
                           "comprehensiveness, and contextual awareness.",
            "factors": [
                {"name": "Clarity", "weight": "35%",
                 "description": "Readability, logical structure, and ease of understanding"},
                {"name": "Depth", "weight": "40%",
                 "description": "Thoroughness, actionable detail, and comprehensive coverage"},
                {"name": "Flow", "weight": "25%",
                 "description": "Context retention, coherent threading, and natural progression"},
            ],
        },
        "ConversationIQ": {
            "definition": "Assesses the overall quality of the human-AI dialogue as a collaborative exchange.",
            "methodology": "Holistic score (0-100) evaluating interaction dynamics and mutual enhancement "
                           "between participants.",
            "factors": [
                {"name": "Flow", "weight": "50%",
                 "description": "Natural progression, turn-taking rhythm, and topic transitions"},
                {"name": "Synergy", "weight": "50%",
                 "description": "Complementary exchanges, building on ideas, and collaborative problem-solving"},
            ],
        },
    }


def _load_raw_definitions(path: Optional[str]) -> Dict[str, Any]:
    """Load definitions from YAML, falling back to the built-in set."""
    path = path or os.path.join(os.path.dirname(__file__), "../config", FileConstants.METRIC_DEFINITIONS_FILE)
    if not os.path.exists(path):
        return _default_definitions()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Failed to load metric definitions from {path}: {e}. Using defaults.")
        return _default_definitions()

    defaults = _default_definitions()
    # Metrics missing from the file keep their built-in definition
    return {name: data.get(name) or defaults[name] for name in METRIC_NAMES}


def load_metric_definitions(path: Optional[str] = None) -> Dict[str, MetricDefinition]:
    raw = _load_raw_definitions(path)
    return {
        name: MetricDefinition(
            title=name,
            definition=raw[name].get("definition", ""),
            methodology=raw[name].get("methodology", ""),
            factors=[MetricFactor(**factor) for factor in raw[name].get("factors", [])],
        )
        for name in METRIC_NAMES
    }


def get_metric_definition(metric: str, path: Optional[str] = None) -> MetricDefinition:
    if metric not in METRIC_NAMES:
        raise ValueError(f"Unknown metric: {metric}")
    return load_metric_definitions(path)[metric]
