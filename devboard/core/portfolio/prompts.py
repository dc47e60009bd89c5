"""Prompt builders for the portfolio pipeline."""

from enum import Enum

from devboard.core.pipeline.state import PortfolioState


class PortfolioStyle(str, Enum):
    minimal = "minimal"
    modern = "modern"
    creative = "creative"
    professional = "professional"
    dark = "dark"


STYLE_GUIDES = {
    PortfolioStyle.minimal: "clean layout, generous whitespace, neutral palette, restrained typography",
    PortfolioStyle.modern: "bold typography, gradients, card-based sections, subtle motion",
    PortfolioStyle.creative: "playful layout, vivid accent colors, asymmetric sections, expressive hover effects",
    PortfolioStyle.professional: "corporate look, structured grid, muted colors, emphasis on experience",
    PortfolioStyle.dark: "dark background, high-contrast text, neon accents, developer aesthetic",
}

SECTIONS = ("Hero", "About", "Skills", "Projects", "Experience", "Contact")


def style_guide(style: str) -> str:
    try:
        return STYLE_GUIDES[PortfolioStyle(style)]
    except ValueError:
        return STYLE_GUIDES[PortfolioStyle.minimal]


def parse_prompt(state: PortfolioState) -> str:
    custom = state.custom_message.strip() or "None"
    return f"""Analyze the following resume/profile content and extract structured information for a portfolio website.

Content:
{state.content}

Target style: {state.style}
Additional instructions from the user: {custom}

Extract and organize:
- Name and professional title
- Skills and technologies
- Projects (name, description, technologies, links)
- Work experience (role, company, dates, highlights)
- Contact information and social links

Return the extracted information as a clear, structured summary. Leave out anything not present in the content."""


def code_prompt(state: PortfolioState) -> str:
    sections = ", ".join(SECTIONS)
    return f"""Create a complete portfolio website as a single React component using Tailwind CSS classes.

Extracted portfolio data:
{state.parsed_data}

Style: {state.style} ({style_guide(state.style)})

Requirements:
- Implement these sections in order: {sections}
- Use only the data above; do not invent employers, projects or contact details
- Responsive layout for mobile and desktop
- Export the component as the default export named Portfolio
- Return ONLY the component code, with no explanations before or after it"""
