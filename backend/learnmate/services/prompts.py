"""
Prompt templates and builders for learning paths and step chat.
"""

from typing import Dict, List

from learnmate.models.request import ChatMessage


# =============================================================================
# LEVEL TABLES
# =============================================================================

LEVEL_INSTRUCTIONS: Dict[str, str] = {
    "beginner": (
        "Target Audience: Beginners. Focus on high-level concepts, use clear and simple "
        "analogies, avoid heavy jargon, and assume zero prior knowledge."
    ),
    "intermediate": (
        "Target Audience: Intermediate Learners. Focus on practical implementation, standard "
        "practices, and connecting concepts. Assume basic familiarity with the domain."
    ),
    "advanced": (
        "Target Audience: Experts. Focus on deep theoretical complexity, edge cases, performance "
        "optimization, and advanced mathematical or architectural principles. Do not over-explain basics."
    ),
}

STEP_COUNTS: Dict[str, str] = {
    "beginner": "5-10",
    "intermediate": "10-20",
    "advanced": "15-30",
}


# =============================================================================
# LEARN PROMPT
# =============================================================================

LEARN_PROMPT = """You are a world-class expert teacher and instructional designer. Your goal is to create a highly engaging, interactive, and visual learning path for the topic: "{topic}".

**DIFFICULTY LEVEL: {level_upper}**
{level_instructions}

CRITICAL INSTRUCTIONS FOR ACCURACY:
1. Prioritize factual correctness above all else. Do not invent libraries, historical events, or scientific principles.
2. Ensure all code snippets are valid, syntactically correct, and use real, existing libraries.
3. If the topic is controversial or theoretical, present it as such, not as absolute fact.
4. If the topic is completely nonsensical or you lack sufficient verifiable information, provide a polite "Step 1" explaining the limitation instead of hallucinating content.

Break the topic down into {step_count} clear, progressive learning steps. Each step must be a self-contained lesson that builds upon the previous one. Use a conversational, encouraging, and storytelling tone.

For each step, you MUST provide the following in rich Markdown format, but DO NOT include the bolded section labels (like "Core Concept:", "Real-World Analogy:", etc.). Just provide the content directly in a flowing, natural structure.

1.  **Core Concept:** Start with a clear and engaging explanation of the main idea. Avoid dry textbook language.
2.  **Visual Aid:** Include a diagram using Mermaid.js syntax (wrapped in a ```mermaid code block) or clear ASCII art to visualize the concept. Place this directly in the flow where it makes sense. IMPORTANT: When using Mermaid, ALWAYS wrap node labels in double quotes to prevent syntax errors (e.g., A["Label (Text)"] --> B["Next"]).
3.  **Real-World Analogy:** Weave in a creative and relatable analogy or metaphor locally.
4.  **Practical Example:** Provide a concrete, practical example. If the topic is technical, provide a well-commented code snippet.
5.  **"Try It Yourself" Challenge:** End with a small, actionable task, thought experiment, or quiz question.
6.  **Key Takeaway:** A single, bolded sentence summarizing the most critical point of the step.

Finally, suggest 3-5 related topics that the user might want to explore next to deepen their understanding.

Format your entire response as a single JSON object with a "steps" array and a "relatedTopics" array of strings. Each object in the "steps" array should have "title" and "content" fields. The "content" field must contain the detailed, multi-part lesson formatted in Markdown.

Example format:
{{
  "steps": [
    {{
      "title": "Step 1: Understanding the Basics",
      "content": "Start with the core concept explanation...\\n\\n```mermaid\\ngraph TD;\\n    A[Start] --> B[Concept];\\n```\\n\\nThen transition into the analogy...\\n\\nHere is an example:\\n```javascript\\n// code snippet\\n```\\n\\n### Try It Yourself\\nChallenge description...\\n\\n**Key Takeaway:** ...summary..."
    }}
  ],
  "relatedTopics": ["Related Topic 1", "Related Topic 2", "Related Topic 3"]
}}

Now, create this detailed, step-by-step learning guide for: {topic} at the {level} level."""


def build_learn_prompt(topic: str, level: str = "beginner") -> str:
    """Build the learning-path prompt for a topic at a difficulty level."""
    return LEARN_PROMPT.format(
        topic=topic,
        level=level,
        level_upper=level.upper(),
        level_instructions=LEVEL_INSTRUCTIONS[level],
        step_count=STEP_COUNTS[level],
    )


# =============================================================================
# CHAT PROMPT
# =============================================================================

CHAT_PROMPT = """You are an expert tutor helping a student learn about "{topic}".

The student is currently on the step: "{step_title}".
Here is the content they are looking at:
\"\"\"
{step_excerpt}
\"\"\"

Conversation History:
{history}

Student Question: "{question}"

Goal: meaningful, deep explanation resolving the user's specific query about this part of the lesson.
Provide a clear, concise, and accurate answer using Markdown. If they ask for examples, provide them."""


def format_history(history: List[ChatMessage]) -> str:
    """Render chat history as Student:/Tutor: lines."""
    return "\n".join(
        f"{'Student' if msg.role == 'user' else 'Tutor'}: {msg.content}"
        for msg in history
    )


def build_chat_prompt(
    topic: str,
    step_title: str,
    step_content: str,
    question: str,
    history: List[ChatMessage],
    context_chars: int = 1000,
) -> str:
    """
    Build the follow-up prompt for a question about the current step.
    Only the first `context_chars` characters of the step are included.
    """
    excerpt = step_content[:context_chars]
    if len(step_content) > context_chars:
        excerpt += "... (truncated for context)"

    return CHAT_PROMPT.format(
        topic=topic,
        step_title=step_title,
        step_excerpt=excerpt,
        history=format_history(history),
        question=question,
    )
