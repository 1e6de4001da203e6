"""Render styles and the background generation templates they select."""

from dataclasses import dataclass
from enum import Enum

from ..errors import InvalidRequest


class RenderStyle(str, Enum):
    STADIUM = "stadium"
    PLAYERS = "players"
    ABSTRACT = "abstract"
    PRESTIGE = "prestige"

    @classmethod
    def parse(cls, value: "str | RenderStyle | None") -> "RenderStyle":
        if value is None or value == "":
            return cls.STADIUM
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(s.value for s in cls)
            raise InvalidRequest(f"Invalid style {value!r}. Must be one of: {allowed}") from None


class CompositionMode(str, Enum):
    CLASSIC = "classic"
    PROGRAM = "program"

    @classmethod
    def parse(cls, value: "str | CompositionMode | None") -> "CompositionMode":
        if value is None or value == "":
            return cls.CLASSIC
        try:
            return cls(value)
        except ValueError:
            raise InvalidRequest(f"Invalid mode {value!r}. Must be 'classic' or 'program'") from None


@dataclass(frozen=True)
class PromptTemplate:
    """A generation prompt. Placeholders: {home}, {away}, {match_count}."""

    id: str
    text: str
    aspect_ratio: str = "9:16"

    def render(self, home: str = "", away: str = "", match_count: int = 1) -> str:
        return self.text.format(home=home, away=away, match_count=match_count)


STADIUM_TEMPLATE = PromptTemplate(
    id="stadium-night-empty",
    text=(
        "Generate a vertical (9:16) photorealistic image of a majestic soccer stadium at night.\n"
        "CRITICAL: The pitch must be COMPLETELY EMPTY. NO PLAYERS, NO REFEREES, NO PEOPLE on the green grass.\n"
        "Visuals:\n"
        "- Wide angle shot from pitch level looking up at the stands.\n"
        "- Pristine green grass illuminated by bright, dramatic stadium floodlights.\n"
        "- The stands are dark but filled with the atmosphere of a crowd (blurred background).\n"
        "- Cinematic lighting, lens flare, high contrast, professional sports photography.\n"
        "Negative prompt: players, people on field, athletes, american football, text, watermark, "
        "day, match in progress."
    ),
)

PLAYERS_TEMPLATE = PromptTemplate(
    id="players-top-third",
    text=(
        "Génère un fond ultra-réaliste pour une affiche de football, avec les deux top players "
        "RECONNAISSABLES de l'équipe {home} et de l'équipe {away} pour la saison en cours.\n"
        "Composition obligatoire :\n"
        "– Les joueurs sont cadrés très haut : têtes, épaules et torses dans le tiers supérieur de l'image.\n"
        "– Leurs corps ne descendent JAMAIS dans la zone inférieure où les logos seront ajoutés.\n"
        "– Action dynamique : course, duel, dribble, tir, pression défensive.\n"
        "Positionnement :\n"
        "– Joueur star de l'équipe {home} à gauche, joueur star de l'équipe {away} à droite.\n"
        "Contrainte stricte : EXACTEMENT un seul ballon visible.\n"
        "Arrière-plan : stade moderne légèrement flou, lumières fortes, ambiance match-night premium.\n"
        "Style : ultra réaliste, détaillé, aucun texte, aucun logo, format vertical haute résolution.\n"
        "Negative prompt: text, typography, letters, words, watermark, american football, rugby, helmet, "
        "distorted faces, bad anatomy, cartoon, multiple balls, full body shot, players in lower half."
    ),
)

ABSTRACT_TEMPLATE = PromptTemplate(
    id="abstract-team-colors",
    text=(
        "Crée un fond abstrait pour une affiche de football, inspiré des visuels sportifs modernes.\n"
        "Utilise uniquement un mélange artistique des deux couleurs principales des équipes du match "
        "({home} vs {away}).\n"
        "Style dynamique, énergique, avec des formes abstraites, des textures fluides, des dégradés vifs "
        "et des effets lumineux modernes.\n"
        "Aspect premium, propre, sans texte ni logos, compatible avec des overlays typographiques.\n"
        "Format vertical (9:16) pour une affiche.\n"
        "Negative prompt: players, people, ball, stadium, grass, text, typography, letters, words, "
        "watermark, realistic figures."
    ),
)

PRESTIGE_TEMPLATE = PromptTemplate(
    id="prestige-black-gold",
    text=(
        "Génère un fond extrêmement élégant et premium pour une affiche de football prestige.\n"
        "Palette uniquement noire et or, rendu luxueux, sobre, moderne et haut de gamme.\n"
        "Reflets dorés subtils, lignes minimalistes, textures métalliques fines.\n"
        "Le fond évoque l'importance d'un match VIP ou d'une finale, sans montrer de joueurs.\n"
        "Format vertical (9:16) haute résolution.\n"
        "Negative prompt: players, people, ball, stadium, grass, green, colors, text, typography, "
        "letters, words, watermark."
    ),
)

PROGRAM_TEMPLATE = PromptTemplate(
    id="program-matchday",
    text=(
        "Create a dramatic, cinematic football match day program poster background.\n"
        "Grand stadium atmosphere with dramatic lighting - spotlights cutting through atmospheric haze.\n"
        "Style: ultra-premium sports broadcast quality, dark and moody with selective lighting highlights.\n"
        "Color scheme: deep blacks, rich shadows with golden/warm highlight accents.\n"
        "This will be used as a background for a {match_count}-match program listing.\n"
        "NO text, NO logos, NO specific players.\n"
        "Aspect ratio: 9:16 portrait orientation for mobile."
    ),
)

TEMPLATES: dict[RenderStyle, PromptTemplate] = {
    RenderStyle.STADIUM: STADIUM_TEMPLATE,
    RenderStyle.PLAYERS: PLAYERS_TEMPLATE,
    RenderStyle.ABSTRACT: ABSTRACT_TEMPLATE,
    RenderStyle.PRESTIGE: PRESTIGE_TEMPLATE,
}


def select_template(style: RenderStyle, mode: CompositionMode = CompositionMode.CLASSIC) -> PromptTemplate:
    """Get the generation template for a style (program posters share one)."""
    if mode == CompositionMode.PROGRAM:
        return PROGRAM_TEMPLATE
    return TEMPLATES[style]
