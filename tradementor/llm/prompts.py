"""Prompt templates and YAML loader for the mentor's three checks."""

import json
from pathlib import Path
from typing import Any, TYPE_CHECKING

import yaml
from jinja2 import BaseLoader, Environment, StrictUndefined

from tradementor.config import get_settings
from tradementor.core.models import MarketSnapshot, PositionCheck

if TYPE_CHECKING:
    from tradementor.journal.models import Trade


class PromptLoader:
    """Loader for YAML-based prompts."""

    def __init__(self, prompts_dir: Path | None = None) -> None:
        self._prompts_dir = prompts_dir or get_settings().prompts_dir
        self._cache: dict[str, dict[str, Any]] = {}

    def load(self, name: str) -> dict[str, Any]:
        """Load and cache a prompt definition from YAML."""
        if name in self._cache:
            return self._cache[name]

        file_path = self._prompts_dir / f"{name}.yaml"
        if not file_path.exists():
            raise FileNotFoundError(f"Prompt file not found: {file_path}")

        with open(file_path, "r", encoding="utf-8") as f:
            prompt_data = yaml.safe_load(f)

        self._cache[name] = prompt_data
        return prompt_data

    def list_available(self) -> list[str]:
        """List available prompt names."""
        if not self._prompts_dir.exists():
            return []
        return sorted(f.stem for f in self._prompts_dir.glob("*.yaml"))


def clean_option_chain(csv_text: str) -> str:
    """Make option-chain CSV safe to embed: no double quotes, one line."""
    cleaned = (csv_text or "").replace('"', "'")
    cleaned = cleaned.replace("\r\n", "\n").replace("\n", " | ")
    return cleaned.strip()


class PromptBuilder:
    """Builder for constructing (system, user) prompt pairs from templates."""

    def __init__(self, loader: PromptLoader | None = None) -> None:
        self._loader = loader or PromptLoader()
        self._jinja = Environment(
            loader=BaseLoader(),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
        )

    def _render(self, name: str, **context: Any) -> tuple[str, str]:
        prompt = self._loader.load(name)
        template = self._jinja.from_string(prompt["template"])
        return prompt["system"].strip(), template.render(**context).strip()

    def build_market_analysis(self, snapshot: MarketSnapshot) -> tuple[str, str]:
        """Build prompts for a full market analysis."""
        return self._render(
            "analysis",
            snapshot=snapshot,
            option_chain=clean_option_chain(snapshot.option_chain),
        )

    def build_routine_check(
        self,
        trade: "Trade",
        check: PositionCheck,
    ) -> tuple[str, str]:
        """Build prompts for the end-of-day review of an open trade."""
        legs = [leg.to_json_dict() for leg in trade.strategy.legs]
        return self._render(
            "routine",
            trade=trade,
            check=check,
            legs_json=json.dumps(legs),
        )

    def build_quick_sentiment(
        self,
        spot: float,
        pcr: float,
        rsi: float,
    ) -> tuple[str, str]:
        """Build prompts for the one-line sentiment check."""
        return self._render("sentiment", spot=spot, pcr=pcr, rsi=rsi)
