"""
core/profiles.py

Static registry of backend model profiles and persona prompt templates.

Every TaskCategory maps to exactly one ModelProfile: the backend model that serves it,
the sampling temperature, the output token budget and the colour used to render its
replies. The registry also assembles the system prompt: a fixed persona block, which
states the present time, followed by an instruction paragraph specific to the category.

The persona and instruction texts are data assets stored under `config/prompts/` so they
can be edited without touching routing code. Construction verifies that both the
profile table and the instruction table cover every category, so lookups never need a
runtime fallback.
"""

import logging
from dataclasses import replace
from pathlib import Path
from typing import Dict, Any, Mapping, Optional

from shared.models import TaskCategory, ModelProfile

logger = logging.getLogger(__name__)

ERROR_MODEL_ID = "error"
ERROR_COLOR = 0x95a5a6  # Gray

TIME_PLACEHOLDER = "current_time"

DEFAULT_PROFILES: Dict[TaskCategory, ModelProfile] = {
    TaskCategory.CONVERSATIONAL: ModelProfile(
        category=TaskCategory.CONVERSATIONAL.value,
        backend_model_id="deepseek/deepseek-chat-v3-0324:free",
        display_name="DeepSeek V3 0324",
        display_color=0x3498db,  # Blue
        temperature=0.8,
        max_output_tokens=1500,
        description="Smooth Conversationalist",
    ),
    TaskCategory.CODE: ModelProfile(
        category=TaskCategory.CODE.value,
        backend_model_id="qwen/qwen3-14b:free",
        display_name="Qwen 3 14B",
        display_color=0xe74c3c,  # Red
        temperature=0.3,
        max_output_tokens=2000,
        description="Technical & Code Wizard",
    ),
    TaskCategory.REASONING: ModelProfile(
        category=TaskCategory.REASONING.value,
        backend_model_id="moonshotai/kimi-vl-a3b-thinking:free",
        display_name="MoonshotAI Kimi VL",
        display_color=0x9b59b6,  # Purple
        temperature=0.4,
        max_output_tokens=2500,
        description="Deep Reasoner",
    ),
    TaskCategory.SPEED: ModelProfile(
        category=TaskCategory.SPEED.value,
        backend_model_id="mistralai/mistral-small-3.1-24b-instruct:free",
        display_name="Mistral Small 3.1 24B",
        display_color=0xf39c12,  # Orange
        temperature=0.2,
        max_output_tokens=500,
        description="Speed Demon",
    ),
    TaskCategory.MULTIMODAL: ModelProfile(
        category=TaskCategory.MULTIMODAL.value,
        backend_model_id="qwen/qwen2.5-vl-3b-instruct:free",
        display_name="Qwen 2.5 VL 3B",
        display_color=0x27ae60,  # Green
        temperature=0.6,
        max_output_tokens=2000,
        description="Multimodal Master",
    ),
}

ERROR_PROFILE = ModelProfile(
    category=ERROR_MODEL_ID,
    backend_model_id=ERROR_MODEL_ID,
    display_name="",
    display_color=ERROR_COLOR,
    temperature=0.0,
    max_output_tokens=1,
    description="Provider failure",
)


def load_prompt_templates(prompts_dir: Path) -> tuple:
    """
    Read the persona template and the per-category instruction files from disk.

    Expected layout:
    - `persona.txt`: the fixed persona block, containing a `{current_time}` placeholder
    - `<category>.txt`: one instruction paragraph per TaskCategory value

    Args:
        prompts_dir (Path): Directory holding the template files.

    Returns:
        tuple: (persona_template, {TaskCategory: instruction}).

    Raises:
        FileNotFoundError: If the persona file or any category file is missing.
    """
    persona_path = prompts_dir / "persona.txt"
    try:
        persona_template = persona_path.read_text(encoding="utf-8").strip()
    except FileNotFoundError:
        raise FileNotFoundError(
            f"Persona prompt file not found: {persona_path}\n"
            f"Please ensure persona.txt exists in the prompts directory."
        )

    instructions: Dict[TaskCategory, str] = {}
    for category in TaskCategory:
        path = prompts_dir / f"{category.value}.txt"
        try:
            instructions[category] = path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            raise FileNotFoundError(
                f"Instruction prompt for category '{category.value}' not found: {path}"
            )

    return persona_template, instructions


class ModelProfileRegistry:
    """
    Read-only lookup of model profiles and persona prompts, indexed by TaskCategory.

    Responsibilities:
    - Resolve the ModelProfile for a category
    - Expose the reserved error profile used when the provider call fails
    - Build the system prompt for a category and a formatted current time
    """

    def __init__(
        self,
        persona_template: str,
        instructions: Mapping[TaskCategory, str],
        profiles: Optional[Mapping[TaskCategory, ModelProfile]] = None,
        error_profile: ModelProfile = ERROR_PROFILE,
    ):
        """
        Args:
            persona_template (str): Persona block with a `{current_time}` placeholder.
            instructions (Mapping[TaskCategory, str]): Category-specific instruction suffixes.
            profiles (Optional[Mapping[TaskCategory, ModelProfile]]): Profile table. Defaults
                to DEFAULT_PROFILES.
            error_profile (ModelProfile): Profile whose colour marks failed requests.

        Raises:
            ValueError: If the profile or instruction table does not cover every category,
                or the persona template lacks the time placeholder.
        """
        profiles = dict(profiles if profiles is not None else DEFAULT_PROFILES)
        self._require_all_categories(profiles, "profile")
        self._require_all_categories(instructions, "instruction")

        if "{" + TIME_PLACEHOLDER + "}" not in persona_template:
            raise ValueError(f"Persona template must contain a '{{{TIME_PLACEHOLDER}}}' placeholder")

        self._profiles = profiles
        self._instructions = dict(instructions)
        self._persona_template = persona_template
        self.error_profile = error_profile

    @staticmethod
    def _require_all_categories(table: Mapping, kind: str) -> None:
        missing = [category.value for category in TaskCategory if category not in table]
        if missing:
            raise ValueError(f"Missing {kind} for categories: {', '.join(missing)}")

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "ModelProfileRegistry":
        """
        Build the registry from the application configuration.

        Prompt templates are read from `config['paths']['prompts_full_path']`. Backend model
        identifiers may be overridden per category through `config['llm']['models']`; all
        other profile fields keep their defaults.

        Args:
            config (Dict[str, Any]): The global CONFIG dictionary.

        Returns:
            ModelProfileRegistry: A ready-to-use registry.
        """
        persona_template, instructions = load_prompt_templates(
            Path(config["paths"]["prompts_full_path"])
        )

        overrides = config.get("llm", {}).get("models", {}) or {}
        profiles: Dict[TaskCategory, ModelProfile] = {}
        for category, profile in DEFAULT_PROFILES.items():
            model_id = overrides.get(category.value)
            if model_id and model_id != profile.backend_model_id:
                logger.info(
                    "[ModelProfileRegistry] Overriding %s model: %s -> %s",
                    category.value, profile.backend_model_id, model_id
                )
                profile = replace(profile, backend_model_id=model_id)
            profiles[category] = profile

        return cls(persona_template, instructions, profiles)

    def profile_for(self, category: TaskCategory) -> ModelProfile:
        return self._profiles[category]

    def persona_prompt(self, category: TaskCategory, formatted_time: str) -> str:
        """
        Build the system prompt for a category.

        Args:
            category (TaskCategory): The classified task category.
            formatted_time (str): Present-time sentence from TimeContext.

        Returns:
            str: Persona block with the time filled in, a blank line, then the category
            instruction.
        """
        persona = self._persona_template.replace("{" + TIME_PLACEHOLDER + "}", formatted_time)
        return f"{persona}\n\n{self._instructions[category]}"

    def describe(self) -> Dict[str, Dict[str, Any]]:
        """
        Summarize the profile table for diagnostics.

        Returns:
            Dict[str, Dict[str, Any]]: category value -> model id, display name, description.
        """
        return {
            category.value: {
                "model": profile.backend_model_id,
                "name": profile.display_name,
                "description": profile.description,
            }
            for category, profile in self._profiles.items()
        }
