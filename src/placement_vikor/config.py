"""Centralized configuration management for the placement engine."""

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field


class WeightsConfig(BaseModel):
    """Default VIKOR weights and strategy parameter.

    Weights are in criterion order C1..C5 and must sum to 1.0
    within ``tolerance``.
    """
    default: list[float] = Field(
        default_factory=lambda: [0.30, 0.20, 0.10, 0.25, 0.15],
        description="Default weights for C1..C5 when the caller supplies none"
    )
    tolerance: float = Field(
        0.01,
        description="Allowed deviation of the weight sum from 1.0"
    )
    v_parameter: float = Field(
        0.5,
        description="Strategy weight of group utility S versus regret R (0-1)"
    )


class ThresholdsConfig(BaseModel):
    """Eligibility thresholds for the gated criteria."""
    c1: float = Field(75.0, ge=0, le=100, description="Minimum Akumulasi Nilai (C1) to qualify")
    c4: float = Field(80.0, ge=0, le=100, description="Minimum Nilai Sertifikasi (C4) to qualify")


class PriorityWeightsConfig(BaseModel):
    """Weights for the allocation priority score.

    Only used to order individuals during capacity allocation. Independent
    of the VIKOR weights.
    """
    c1: float = Field(0.40, description="Weight of Akumulasi Nilai (C1)")
    c2: float = Field(0.20, description="Weight of Penilaian Sikap (C2)")
    c4: float = Field(0.30, description="Weight of Nilai Sertifikasi (C4)")
    c5: float = Field(0.10, description="Weight of Rekomendasi Guru (C5)")


class CapacityConfig(BaseModel):
    """Capacity handling."""
    unlimited_sentinel: int = Field(
        999_999,
        description="Capacity used for alternatives that declare none"
    )


class CriteriaConfig(BaseModel):
    """Display labels for the five criteria."""
    labels: list[str] = Field(
        default_factory=lambda: [
            "Akumulasi Nilai (C1)",
            "Sikap (C2)",
            "Jarak (C3)",
            "Sertifikasi (C4)",
            "Rekomendasi (C5)",
        ]
    )
    summary_labels: list[str] = Field(
        default_factory=lambda: [
            "C1: Akumulasi Nilai",
            "C2: Penilaian Sikap",
            "C3: Jarak",
            "C4: Nilai Sertifikasi",
            "C5: Rekomendasi Guru",
        ]
    )


class ScorerConfig(BaseModel):
    """Complete configuration for the placement engine."""
    weights: WeightsConfig = Field(default_factory=WeightsConfig)
    thresholds: ThresholdsConfig = Field(default_factory=ThresholdsConfig)
    priority_weights: PriorityWeightsConfig = Field(default_factory=PriorityWeightsConfig)
    capacity: CapacityConfig = Field(default_factory=CapacityConfig)
    criteria: CriteriaConfig = Field(default_factory=CriteriaConfig)


# Global config instance
_config: Optional[ScorerConfig] = None


def get_config() -> ScorerConfig:
    """Get the current configuration.

    Returns the global config, initializing with defaults if not yet loaded.
    """
    global _config
    if _config is None:
        _config = ScorerConfig()
    return _config


def load_config(path: Path) -> ScorerConfig:
    """Load configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        The loaded ScorerConfig.
    """
    global _config

    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)

    _config = ScorerConfig.model_validate(data or {})
    return _config


def reset_config() -> None:
    """Reset configuration to defaults."""
    global _config
    _config = ScorerConfig()


def find_config_file() -> Optional[Path]:
    """Find an engine configuration file.

    Looks in (order of priority):
    1. PLACEMENT_VIKOR_CONFIG environment variable
    2. ./vikor-config.yaml
    3. ./vikor-config.yml
    4. ~/.config/placement-vikor/config.yaml
    """
    env_path = os.environ.get("PLACEMENT_VIKOR_CONFIG")
    if env_path:
        path = Path(env_path)
        if path.exists():
            return path

    for name in ["vikor-config.yaml", "vikor-config.yml"]:
        path = Path(name)
        if path.exists():
            return path

    user_config = Path.home() / ".config" / "placement-vikor" / "config.yaml"
    if user_config.exists():
        return user_config

    return None


def save_default_config(path: Path) -> None:
    """Save the default configuration to a YAML file.

    Args:
        path: Path where to save the configuration.
    """
    data = ScorerConfig().model_dump()

    yaml_content = """# Placement VIKOR Configuration
# =============================
#
# Default weights, eligibility thresholds, allocation priority weights
# and criterion labels.
#
# Copy this file to one of these locations:
#   - ./vikor-config.yaml (current directory)
#   - ~/.config/placement-vikor/config.yaml (user config)
#
# Or set the PLACEMENT_VIKOR_CONFIG environment variable.

"""
    yaml_content += yaml.dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(yaml_content)
