"""Prompt builders for the README pipeline. Pure functions of the state."""

from typing import Optional

from devboard.core.pipeline.state import PersonalInfo, ReadmeState

NOT_SPECIFIED = "Not specified"

_NO_FENCES = "DO NOT include ```markdown or ``` anywhere in the response"


def _info(state: ReadmeState) -> PersonalInfo:
    return state.personal_info or PersonalInfo()


def _or(value: Optional[str], fallback: str) -> str:
    return value if value else fallback


def _personal_lines(info: PersonalInfo) -> str:
    return (
        f"- Field: {_or(info.field, NOT_SPECIFIED)}\n"
        f"- Experience: {_or(info.experience, NOT_SPECIFIED)}\n"
        f"- Skills: {_or(info.skills, NOT_SPECIFIED)}\n"
        f"- Interests: {_or(info.interests, NOT_SPECIFIED)}\n"
        f"- Goals: {_or(info.goals, NOT_SPECIFIED)}"
    )


def analysis_prompt(state: ReadmeState) -> str:
    info = _info(state)
    if state.is_new:
        return f"""Analyze the username "{state.username}" and create a professional analysis for a GitHub README.

Personal Information:
{_personal_lines(info)}

Consider what kind of developer they are and suggest appropriate sections.
Return a brief analysis of what should be included in their README."""

    return f"""Analyze this existing README content and suggest improvements:

{state.current_content}

Personal Information for enhancement:
{_personal_lines(info)}

Provide analysis on what's good, what's missing, and what could be improved."""


def generation_prompt(state: ReadmeState) -> str:
    info = _info(state)
    username = state.username
    if not state.is_new:
        return f"""Based on this analysis: {state.analysis}

Improve this existing README content:
{state.current_content}

Add missing sections like GitHub stats, profile views, and daily quotes.
Ensure proper markdown formatting with clean spacing and structure.

CRITICAL: Return ONLY the raw markdown content without any code block wrappers.
DO NOT include ```markdown or ``` in your response.
Return ONLY the improved markdown content."""

    return f"""Based on this analysis: {state.analysis}

Create a comprehensive GitHub profile README for username "{username}".

Personal Details:
- Field: {_or(info.field, "Developer")}
- Experience Level: {_or(info.experience, NOT_SPECIFIED)}
- Main Skills: {_or(info.skills, "Various technologies")}
- Current Interests: {_or(info.interests, "Learning new technologies")}
- Goals: {_or(info.goals, "Growing as a developer")}

Create a well-formatted markdown README with proper spacing and structure. Include these sections:

# Hi, I'm {username}! 👋

## About Me
Write a compelling about section based on their field and experience

## 🚀 Skills & Technologies
List their skills in a well-organized format using bullet points

## 🌱 Currently Learning
Based on their interests

## 🎯 Goals
Based on their goals

## 📊 GitHub Stats
![{username}'s GitHub stats](https://github-readme-stats.vercel.app/api?username={username}&show_icons=true&theme=radical)

![Top Languages](https://github-readme-stats.vercel.app/api/top-langs/?username={username}&layout=compact&theme=radical)

## 💡 Daily Quote
![Quote](https://quotes-github-readme.vercel.app/api?type=horizontal&theme=radical)

## 👀 Profile Views
![Profile Views](https://komarev.com/ghpvc/?username={username}&color=blueviolet)

## 📫 Connect with Me
Add contact information and social links

CRITICAL FORMATTING REQUIREMENTS:
- Return ONLY the raw markdown content
- DO NOT wrap the response in code blocks
- {_NO_FENCES}
- Start directly with the # Hi, I'm {username}! 👋 header
- Use proper line breaks between sections (double line breaks)
- Use bullet points with - or * for lists
- Ensure proper spacing around headers
- Make sure all markdown syntax is clean and properly formatted
- Use emojis appropriately for visual appeal

Return ONLY the markdown content with perfect formatting. No code blocks, no explanations."""


def review_prompt(state: ReadmeState) -> str:
    return f"""Review and refine this generated README content:

{state.generated_content}

Ensure:
- Proper markdown formatting with clean line breaks between sections
- Well-structured sections with appropriate spacing
- Professional and engaging tone
- Proper use of headers, lists, and formatting
- Clean, readable structure
- All GitHub stats widgets are properly formatted
- Profile views and daily quote widgets are included

CRITICAL REQUIREMENT: Return ONLY the raw markdown content.
DO NOT wrap your response in code blocks.
{_NO_FENCES}.
Return the final, polished README content as plain markdown text only."""
