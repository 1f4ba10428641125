"""Prompt construction for every generative call in the pipeline.

All functions here are pure: identical inputs always produce
byte-identical text, and nothing here touches the network.

Simulation settings map to fixed clauses through the tables below; the
default value of each setting (static / natural / idle) contributes no
clause.
"""

from typing import List, Optional

from .models import DesignBrief, GroundingContext, SimulationConfig

PHYSICS_CLAUSES = {
    "static": None,
    "flow": "Fabric Physics: fabric reacts to air with dynamic movement, lifting and rippling at the hem.",
    "heavy": "Fabric Physics: fabric hangs heavily, minimal folds, with a weighted drape.",
    "wet": "Fabric Physics: fabric must appear damp, darker, and clinging to the skin.",
}

LIGHTING_CLAUSES = {
    "natural": None,
    "studio": "Lighting Synthesis: even studio key and fill lighting with soft, controlled shadows.",
    "dramatic": "Lighting Synthesis: high contrast, noir-style shadows.",
    "neon": "Lighting Synthesis: cyberpunk style colored rim lights (pink/blue).",
}

ACTION_CLAUSES = {
    "idle": None,
    "walking": "Pose Estimation: adapt the garment to a mid-stride walking pose, with fabric following the legs.",
    "running": "Pose Estimation: adapt the garment to a running pose, with stretch at knees and elbows.",
    "fighting": "Pose Estimation: adapt the garment to a fighting stance, with tension across shoulders and back.",
}

SAFETY_CLAUSE_TEMPLATE = (
    "ACTOR CONSTRAINTS / SAFETY (Priority: High): {constraints}. "
    "Ensure these constraints modify the fit visually."
)

ENVIRONMENT_HEADER = "[CONTEXT & ENVIRONMENT]"
SIMULATION_HEADER = "[PHYSICS & LIGHTING ENGINE SETTINGS]"


def compose_simulation_directives(config: SimulationConfig) -> List[str]:
    """
    Turn simulation settings into ordered directive clauses.

    Order is physics, lighting, action, then the actor safety clause.

    Args:
        config: Simulation settings

    Returns:
        List of clauses (empty for an all-default config)
    """
    clauses = [
        PHYSICS_CLAUSES[config.physics],
        LIGHTING_CLAUSES[config.lighting],
        ACTION_CLAUSES[config.action],
    ]
    directives = [c for c in clauses if c]

    # Echoed exactly as given; strip() only decides blankness
    constraints = config.actor_constraints
    if constraints and constraints.strip():
        directives.append(SAFETY_CLAUSE_TEMPLATE.format(constraints=constraints))
    return directives


def compose_directive_block(
    config: Optional[SimulationConfig] = None,
    context: Optional[str] = None
) -> str:
    """
    Build the environment + simulation block of a compositing prompt.

    Args:
        config: Optional simulation settings
        context: Optional free-text environment description, placed first

    Returns:
        Block text, or "" when there is nothing to add
    """
    sections = []
    if context and context.strip():
        sections.append(f"{ENVIRONMENT_HEADER}\n{context.strip()}")
    if config is not None:
        directives = compose_simulation_directives(config)
        if directives:
            sections.append(SIMULATION_HEADER + "\n" + "\n".join(f"- {d}" for d in directives))
    return "\n\n".join(sections)


def build_virtual_fit_prompt(
    garment_description: str,
    context: Optional[str] = None,
    config: Optional[SimulationConfig] = None
) -> str:
    """Prompt for dressing the actor in the model image with the garment image."""
    block = compose_directive_block(config, context)
    parts = [
        "Act as a professional high-end VFX compositor for film.",
        "Task: Realistically digitally dress the person in the 'Model Image' "
        "with the clothing item from the 'Garment Image'.",
        f"Garment Description: {garment_description}",
    ]
    if block:
        parts.append(block)
    parts.append(
        "Requirements:\n"
        "1. Computer Vision Match: The clothing must perfectly align with the actor's skeleton rig and posture.\n"
        "2. Photorealism: Match the film grain, resolution, and sensor noise of the Model Image.\n"
        "3. Integrity: Do NOT change the model's face, hair, or background. Only replace the clothing."
    )
    return "\n\n".join(parts)


def build_design_system_instruction(grounding: GroundingContext, output_language: str) -> str:
    """System directive for the costume design conversation."""
    return f"""You are an expert AI Costume Stylist & Designer for Film/TV.
Your Goal: Create a "Look" that fits the Drama (Script), Visuals (Camera), Production Reality (Budget/Weather), and Character Psychology.

CORE LOGIC & CONSTRAINTS:
1. Psychological Mirroring: The costume MUST reflect the character's internal arc, secrets, or transformation.
2. Script Rule: Every item must have a dramatic reason.
3. Weather/Location Rule: You MUST adapt the fabrics/layers to the REAL weather conditions provided: "{grounding.condition}".
4. Continuity & Safety: Consider stunts, multiple takes (copies needed), and actor safety (footwear).
5. Camera: Avoid moire patterns (tight grids), pure white (burnout), or noisy fabrics unless requested.
6. Language: Descriptions and rationale MUST be written in {output_language}; JSON keys must be in English.

TOOLS:
- If the provided conditions are missing or unclear, you may call get_location_conditions once.

OUTPUT FORMAT GUIDELINES:
- dramaticDescription: A compelling narrative explaining how this look visualizes the character's psychological state and the scene's mood.
- rationale: Specific points linking garment choices to emotional beats.
- Every field is required and must not be empty.
"""


def build_design_request(brief: DesignBrief, grounding: GroundingContext) -> str:
    """User turn carrying the brief, the grounding summary and step instructions."""
    sources = ", ".join(grounding.sources) if grounding.sources else "none"
    return f"""Requesting Costume Design for:
[A] Context: Project: {brief.project_type}, Scene: {brief.scene_context}
[B] Character: Profile: {brief.character_profile}, Psychology: {brief.psychological_state}
[C] Constraints: Location: {brief.filming_location}, Notes: {brief.production_constraints or 'None'}

Data from Location Search: {grounding.condition} (approx. {grounding.temperature:g}F; sources: {sources}).

Steps:
1. Infer the 'realWeather' fields (temp in Fahrenheit, condition, location) from the location data.
2. Derive the look from the character psychology and the scene.
3. Fill the breakdown and productionNotes completely.
4. Write imagePrompt as a concise visual description for a concept art render.

Generate the design JSON."""


def build_concept_art_prompt(image_prompt: str) -> str:
    return f"""Cinematic full body shot. Movie still.
Subject: {image_prompt}.
Lighting: Cinematic, dramatic.
Quality: 8k, highly detailed textures."""


def build_garment_prompt(description: str) -> str:
    return f"""Generate a high-quality, photorealistic image of a single clothing item: {description}.
The item should be isolated on a plain white or transparent background.
Flat lay photography style or ghost mannequin style.
Professional fashion product photography.
No models, no human body parts, just the garment.
Centered, entire item visible."""


def build_fit_analysis_prompt(constraints: str, output_language: str) -> str:
    return f"""Analyze this generated costume fit image for a film production safety report.

Actor Constraints Provided: "{constraints}"

Evaluate the following criteria strictly:
1. Safety: Are there tripping hazards (too long), choking hazards (tight neck), or visibility issues?
2. Comfort: Does the fabric look too heavy, tight, or restrictive given the constraints?
3. Movement: Will this restrict running or fighting if required?

Return a JSON object with:
- compatibilityScore: (Number 0-100)
- safetyIssues: (Array of strings, e.g., "Hemline trip hazard")
- fabricNotes: (String description of how the fabric sits)
- movementPrediction: (String prediction of movement range)

Response Language: English for JSON keys, {output_language} for values."""


def build_stress_test_prompt(action_label: str) -> str:
    return f"""A cinematic video of this character {action_label}.
Focus on the fabric movement, weight, and lighting interaction.
High quality, photorealistic 1080p, film grain."""


TRANSCRIPTION_PROMPT = "Transcribe this audio exactly as spoken."

VIDEO_ANALYSIS_PROMPT = (
    "Analyze this video. Describe the visual style, costume era, and general mood "
    "suitable for a costume design brief."
)
