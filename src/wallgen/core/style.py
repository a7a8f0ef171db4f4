"""Isometric Micro-World style definition.

Everything in this module is data: the system instruction and response
schema sent to Gemini, and the fixed fragments merged into every wallpaper
prompt.  Orchestration code only references these names, so the visual
style can be revised here without touching the request flow.  Bump
:data:`STYLE_VERSION` whenever the content changes; it is logged with each
synthesized prompt.
"""

from __future__ import annotations

STYLE_VERSION = "2025.1"

# ---------------------------------------------------------------------------
# Gemini system instruction.
# ---------------------------------------------------------------------------

SYSTEM_PROMPT = """You are an expert prompt engineer for AI image generation, specializing in structured JSON outputs for the Flux image generation model.

Your goal is to generate a JSON object based on a user's input of a City, Time, and Weather.

THE VISUAL STYLE:
The output must ALWAYS describe a specific "Isometric Micro-World" style.
- Geometry: A floating, square-rounded platform isolated in the center. On this platform, the iconic landmarks of the city are condensed and arranged in a pleasing, toy-like but high-fidelity cluster.
- Platform: The platform must be a THIN, SLIM base—minimal vertical thickness (like a thin slab or tile), never a chunky or thick block. The platform size must be CONSISTENT across all cities. CRITICAL: The ENTIRE platform must fit FULLY within the image frame—all four sides and corners visible. No cropping, no edges cut off. Camera framing should show the complete platform with margin/padding from the image edges.
- City layout: The platform must feel like a city miniature. Include roads or pathways connecting the landmarks, and nature elements (stylized trees, greenery, small park areas). AVOID: people, cars, buses, and other small detailed figures—keep the scene clean.
- Proportions: Landmarks must have sensible relative scales. The tallest landmark (e.g., Eiffel Tower, CN Tower) should dominate; smaller buildings proportionally smaller. Avoid oversizing secondary landmarks.
- Render Style: 3D rendered, "Blender Cycles" look, smooth clay or matte plastic textures, soft ambient occlusion, isometric projection (orthographic view), minimalistic but detailed.
- Background & Environment: The platform floats in clear sky. Clouds and sky appear above and behind the city; volumetric stylized clouds in the upper portion (above the tallest landmarks). The area below the platform is a clear empty void. Solid or gradient sky appropriate for time of day above.

LANDMARKS — Per-building subjects with visual descriptions:
- Return 3–5 SEPARATE Landmark subjects (one per building). Do NOT use a single "Landmark Cluster".
- For each landmark: include its name AND clear visual descriptors (shape, structure, materials, distinctive features).
- For landmarks that may NOT be globally iconic (e.g., Rogers Centre, ROM Crystal, Casa Loma): the image model may not recognize names alone—ALWAYS add descriptive details: shape (dome, tower, crystal, arch), structure (angular facets, circular, retractable roof), materials (glass, stone, metal). Example: "Royal Ontario Museum Crystal" → "Deconstructivist crystalline structure with sharp angular glass facets emerging from historic stone base".
- For world-famous landmarks (Eiffel Tower, CN Tower): a brief visual cue helps: "needle-like tower with observation deck", "distinctive dome shape".

INPUT VARIABLES HANDLING:
1. City: Select 3–5 distinct landmarks for that city. Each becomes its own Landmark subject on the platform.
2. Time:
   - Day: Bright, high-key lighting, soft shadows.
   - Sunset/Sunrise: Golden hour, long shadows, warm oranges/purples.
   - Night: Dark blue background, landmarks lit by internal warm lights (windows) or street lamps, glowing effects.
3. Weather:
   - Sunny: Fluffy white clouds, sharp soft shadows.
   - Rainy: Darker grey clouds, glossy wet surfaces on the ground, perhaps subtle rain streaks.
   - Snow: White caps on roofs, white ground, cool tones.

ASPECT RATIO:
- When image is portrait (tall): frame for vertical composition—platform centered with sky above and below. Ensure the full platform fits in the narrower width.
- When image is landscape (wide): frame for horizontal composition—platform centered with margin.
- When square: center the platform with equal margin on all sides.

OUTPUT FORMAT:
Return ONLY the raw JSON object with the following fields: scene, subjects, color_palette, lighting, mood.
- subjects: 3–5 Landmark entries (one per building, each with type "Landmark" and visual description) + 1 Environment entry (type "Environment", clouds/sky in upper background). The platform is pre-defined and injected separately—describe only the buildings and environment ON the platform, not the platform itself.
- color_palette: Include HEX codes when helpful for consistency (e.g., "#87CEEB" for sky blue)."""

# ---------------------------------------------------------------------------
# Gemini response schema -- only the five dynamic fields.
# ---------------------------------------------------------------------------

RESPONSE_SCHEMA: dict = {
    "type": "object",
    "properties": {
        "scene": {
            "type": "string",
            "description": (
                "Describe the city content ON the platform: landmarks with sensible "
                "proportions (tallest dominates), roads connecting them, trees/greenery, "
                "weather, and time of day. The platform itself is pre-defined—do not "
                "describe it; focus only on what sits on it. No people, cars, or buses."
            ),
        },
        "subjects": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "type": {
                        "type": "string",
                        "enum": ["Landmark", "Environment"],
                        "description": "Landmark for each building; Environment for sky/clouds",
                    },
                    "description": {
                        "type": "string",
                        "description": (
                            "For Landmark: building name + visual descriptors (shape, "
                            "structure, materials). For Environment: clouds, sky. Always "
                            "add visual details for lesser-known buildings."
                        ),
                    },
                    "pose": {"type": "string"},
                    "position": {
                        "type": "string",
                        "description": (
                            "For Landmark: position on platform (e.g., center-back, left "
                            "side). For Environment: upper background, above city; area "
                            "below platform is clear empty void."
                        ),
                    },
                },
                "required": ["type", "description", "pose", "position"],
            },
            "description": (
                "3–5 Landmark entries (one per building) and 1 Environment entry. "
                "Landmarks on platform; Environment in upper background; platform is "
                "pre-defined elsewhere."
            ),
        },
        "color_palette": {
            "type": "array",
            "items": {"type": "string"},
            "description": (
                "3 colors: dominant sky color, light color, accent color. Use HEX codes "
                "when possible (e.g., #87CEEB) for consistency."
            ),
        },
        "lighting": {
            "type": "string",
            "description": "Directional light description based on time and weather",
        },
        "mood": {
            "type": "string",
            "description": "Emotional atmosphere based on time and weather",
        },
    },
    "required": ["scene", "subjects", "color_palette", "lighting", "mood"],
}

# ---------------------------------------------------------------------------
# Fixed fragments merged after the dynamic fields.
# ---------------------------------------------------------------------------

STYLE = (
    "Isometric 3D render, orthographic view, claymorphism, soft global illumination, "
    "Octane render, cute, miniature world, high fidelity, 4k"
)

COMPOSITION = (
    "Isometric centered. Platform fully contained—entire platform visible within frame, "
    "no edges cut off, margin from image borders."
)

CAMERA: dict[str, str] = {
    "angle": "high angle isometric view (approx 45 degrees)",
    "distance": (
        "pulled back so the entire platform fits within frame with margin, "
        "full object visibility"
    ),
    "lens": "50mm orthographic",
}

PLATFORM = (
    "Thin slim platform base, minimal thickness, thin slab, NOT thick or chunky. "
    "Platform size consistent. ENTIRE platform FULLY visible within image—all edges and "
    "corners contained, no cropping or cut-off. Centered with margin from frame edges."
)

ENVIRONMENT = (
    "Clouds and sky above and behind the city. Clear empty void below the platform. "
    "Volumetric clouds in upper sky only."
)

PLATFORM_SUBJECT: dict[str, str] = {
    "type": "Platform",
    "description": (
        "Thin slim square platform with rounded corners, minimal vertical thickness like a "
        "flat slab or tile, light gray or off-white concrete texture. Entire platform fully "
        "visible within frame—all sides and corners contained, no cropping."
    ),
    "pose": "Horizontal base",
    "position": (
        "Center of composition, floating in clear sky, fully framed within image boundaries"
    ),
}

URBAN_LAYOUT_SUBJECT: dict[str, str] = {
    "type": "UrbanLayout",
    "description": (
        "Light gray roads or pathways connecting landmarks on the platform. Stylized green "
        "trees and small park areas along paths. City miniature feel. No people, cars, "
        "buses, or small figures."
    ),
    "pose": "Flat on platform surface",
    "position": "On platform surface, between and around landmarks",
}
