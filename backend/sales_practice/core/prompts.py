"""
Prompt templates for the customer persona and the post-session critique.
All functions are pure: same inputs, same text.
"""

from typing import Iterable, Optional

from ..models.session import Message, SessionContext

DEFAULT_SCENARIO = "General sales conversation"

COACH_SYSTEM_PROMPT = (
    "You are an expert sales coach providing detailed feedback on sales conversations."
)

ANALYSIS_SECTIONS = (
    "**Overall Performance** (1-10 rating)",
    "**Strengths** - What the salesperson did well",
    "**Areas for Improvement** - Specific areas to work on",
    "**Communication Style** - Tone, clarity, professionalism",
    "**Product Knowledge** - How well they demonstrated understanding",
    "**Objection Handling** - How they addressed customer concerns",
    "**Engagement & Rapport** - Connection with the customer",
    "**Closing Technique** - Effectiveness of closing attempts",
    "**Specific Recommendations** - Actionable advice for improvement",
    "**Key Takeaways** - Main lessons from this practice session",
)

SPEAKER_LABELS = {"user": "Salesperson", "assistant": "Customer"}


def scenario_text(scenario: Optional[str]) -> str:
    return scenario or DEFAULT_SCENARIO


def build_persona_prompt(product: str, customer_profile: str, scenario: Optional[str] = None) -> str:
    """Render the system message that puts the model in the customer's seat."""
    return f"""You are taking part in a sales practice exercise. A salesperson is rehearsing a conversation with you.

SCENARIO DETAILS:
- Product/Service: {product}
- Customer Profile: {customer_profile}
- Scenario: {scenario_text(scenario)}

YOUR ROLE:
You play the CUSTOMER described above. Behave like that person would in a real conversation:

1. Stay in character as the customer for the whole conversation
2. Ask the questions this customer would ask about the product/service
3. Raise realistic objections that fit the customer profile
4. Let your interest and engagement rise or fall with the salesperson's performance
5. Push back where a real buyer would
6. Keep your replies natural so the salesperson gets useful practice

CUSTOMER BEHAVIOR GUIDELINES:
- Match the knowledge level, needs and priorities of the profile
- Do not make the sale easy
- Voice concerns the way a real customer would
- Warm up when the salesperson makes a genuinely good point
- Never give coaching, feedback or hints about sales technique

Remember: you are the CUSTOMER, not a coach. The salesperson is practicing on you."""


def render_transcript(messages: Iterable[Message]) -> str:
    """Render the non-system messages as Salesperson/Customer lines."""
    lines = [
        f"{SPEAKER_LABELS[msg.role]}: {msg.content}"
        for msg in messages
        if msg.role != "system"
    ]
    return "\n\n".join(lines)


def build_analysis_prompt(transcript: str, context: SessionContext) -> str:
    """Render the critique request for a finished (or in-progress) conversation."""
    sections = "\n".join(
        f"{number}. {section}" for number, section in enumerate(ANALYSIS_SECTIONS, start=1)
    )
    return f"""You are an expert sales coach. Analyze this sales conversation and provide detailed feedback.

CONVERSATION:
{transcript}

CONTEXT:
- Product: {context.product}
- Customer Profile: {context.customer_profile}
- Scenario: {scenario_text(context.scenario)}

Please provide a comprehensive analysis covering:

{sections}

Be constructive, specific, and provide actionable feedback that will help improve their sales skills."""
