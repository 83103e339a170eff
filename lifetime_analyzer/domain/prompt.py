"""
Synthèse du prompt envoyé au service de génération.

Le prompt suit un gabarit fixe de sections ordonnées. Aucun calcul n'est fait ici: le service
reçoit la date du jour et l'année de naissance comme vérité de référence et doit les utiliser
au lieu d'une date devinée. Même saisie + mêmes faits => chaîne identique octet pour octet.
"""

from __future__ import annotations

from dataclasses import dataclass

from lifetime_analyzer.domain.entities import TemporalFacts, UserInput

ASSISTANT_NAME = "AI LifeTime Analyzer"
CLOSING_LINE = (
    "“AI LifeTime Analyzer — turning your date of birth into your life’s magical timeline! 🌟”"
)
HEARTBEATS_PER_MINUTE = 75

_USE_CURRENT_DATE = "**Using the provided 'Current Date for Calculation' ({current_date})**"


@dataclass(frozen=True)
class Subsection:
    heading: str
    bullets: tuple[str, ...]


@dataclass(frozen=True)
class Section:
    heading: str
    subsections: tuple[Subsection, ...]


REPORT_SECTIONS: tuple[Section, ...] = (
    Section(
        "🧍 PERSONAL AGE REPORT",
        (
            Subsection(
                "🎉 Age Summary",
                (
                    f"{_USE_CURRENT_DATE}, calculate and display the user's exact current age "
                    "in years, months, and days.",
                    "Then, calculate and display the total time since birth in total days, "
                    "total hours, and total seconds.",
                ),
            ),
            Subsection(
                "📅 Next Birthday Countdown",
                (
                    f"{_USE_CURRENT_DATE}, calculate and display the countdown to their next "
                    "birthday in months, days, and hours.",
                ),
            ),
            Subsection(
                "💫 Zodiac & Lucky Details",
                (
                    "Determine and state their Western Zodiac Sign.",
                    "Determine and state their Vedic Zodiac Sign (based on the date).",
                    "Provide a lucky number, a lucky color, and a ruling planet based on their "
                    "birth date or zodiac.",
                ),
            ),
        ),
    ),
    Section(
        "🌍 HISTORICAL CONTEXT ({country})",
        (
            Subsection(
                "🏛️ {country} Since {birth_year}",
                (
                    "Summarize major historical events, significant government changes, and "
                    "important laws introduced in {country} since the user's birth year "
                    "({birth_year}).",
                    "Highlight key developments in infrastructure, technology, education, and "
                    "healthcare.",
                    "Mention the Prime Minister/President and other key leaders who were in "
                    "power in {country} during the user's birth year.",
                    "List 2-3 major positive and 2-3 major negative changes that have occurred "
                    "in the country since their birth.",
                ),
            ),
            Subsection(
                "📈 Economy & Growth Comparison",
                (
                    "Find and compare the GDP and Per Capita Income of {country} from the "
                    "user's birth year ({birth_year}) with the current year's data (or latest "
                    "available). Present it clearly.",
                ),
            ),
        ),
    ),
    Section(
        "🌐 GLOBAL CHANGES",
        (
            Subsection(
                "🌍 World After {birth_year}",
                (
                    "List important world events that happened after the user's birth (e.g., "
                    "in science, technology, major conflicts, space exploration, pandemics, "
                    "the rise of AI, etc.).",
                    "Briefly describe how the world economy, technology, and environment have "
                    "evolved since then.",
                    "Mention at least 3 major inventions or technological revolutions that "
                    "have occurred since their birth year.",
                ),
            ),
        ),
    ),
    Section(
        "💫 NAME ANALYSIS",
        (
            Subsection(
                "💖 Name Meaning & Shayari",
                (
                    'Explain the meaning of the name "{name}" in both English and Hindi.',
                    "Describe personality traits associated with their name, based on "
                    "numerology (using the name's letters) or the first letter of their name.",
                    "Generate a short, personalized, 2-4 line poetry or shayari in Hindi "
                    "(using Roman script) that beautifully describes their name and "
                    "personality.",
                ),
            ),
        ),
    ),
    Section(
        "🔮 ASTROLOGY & LIFE PREDICTION (for fun!)",
        (
            Subsection(
                "✨ Future Predictions",
                (
                    "Predict an approximate age range when the user might get married.",
                    "Describe the likely personality of their future partner (based on fun "
                    "zodiac/numerology logic).",
                    "Suggest possible career or job fields that might suit them based on their "
                    "birth date's energy.",
                    'Mention the age ranges or periods that are most likely to be their "peak '
                    'years" for success.',
                    "Provide one powerful, motivational line tailored to their life journey.",
                ),
            ),
        ),
    ),
    Section(
        "📊 FUN FACTS & STATS",
        (
            Subsection(
                "🔢 Fun Lifetime Stats",
                (
                    f"{_USE_CURRENT_DATE}, calculate the approximate number of times their "
                    "heart has beaten since birth (use an average of "
                    f"{HEARTBEATS_PER_MINUTE} beats per minute).",
                    "State how many times the Earth has revolved around the Sun since their "
                    "birth (this is their age in years).",
                    "Provide the total number of months, weeks, days, hours, minutes, and "
                    "seconds they have lived.",
                    'Mention one interesting "Did You Know?" fact from their birth year '
                    "({birth_year}).",
                ),
            ),
        ),
    ),
)


def _render_sections(values: dict[str, str]) -> str:
    blocks: list[str] = []
    for section in REPORT_SECTIONS:
        lines = [f"## {section.heading.format_map(values)}"]
        for sub in section.subsections:
            lines.append("")
            lines.append(f"### {sub.heading.format_map(values)}")
            lines.extend(f"- {bullet.format_map(values)}" for bullet in sub.bullets)
        blocks.append("\n".join(lines))
    return "\n\n---\n\n".join(blocks)


def synthesize_prompt(user_input: UserInput, facts: TemporalFacts) -> str:
    """Construit le prompt complet à partir d'une saisie validée et des faits dérivés."""
    values = {
        "name": user_input.name.strip(),
        "country": user_input.country.strip(),
        "birth_year": str(facts.birth_year),
        "current_date": facts.current_date_iso,
    }
    dob = facts.birth_date.isoformat()
    header = "\n".join(
        [
            f"You are an advanced, friendly AI assistant called “{ASSISTANT_NAME}”. Your "
            "persona is a mix of an astrologer, a historian, and a wise friend. Your goal is "
            "to take a user's Name, Date of Birth, and Country as input and return a detailed, "
            "beautifully formatted, human-like report in a storytelling style.",
            "",
            "**VERY IMPORTANT:** All calculations must be based on the current date provided "
            "below. Do not guess the current date and never replace it with your own.",
            "",
            "**User Details:**",
            f"- Name: {values['name']}",
            f"- Date of Birth: {dob}",
            f"- Year of Birth: {values['birth_year']}",
            f"- Country: {values['country']}",
            f"- **Current Date for Calculation:** {values['current_date']}",
            "",
            "**Please generate the report with the following exact sections and content:**",
        ]
    )
    closing = "\n".join(
        [
            "## ✨ Closing Note",
            "End with a sweet, friendly line:",
            CLOSING_LINE,
        ]
    )
    return f"{header}\n\n---\n\n{_render_sections(values)}\n\n---\n\n{closing}\n"
