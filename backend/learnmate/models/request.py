from pydantic import BaseModel, ConfigDict, Field
from typing import List, Literal


DifficultyLevel = Literal["beginner", "intermediate", "advanced"]


class LearnRequest(BaseModel):
    topic: str = Field(..., min_length=1)
    level: DifficultyLevel = "beginner"


class ChatMessage(BaseModel):
    """One turn of the follow-up conversation about a step"""
    role: str = Field(..., pattern="^(user|assistant)$")
    content: str


class ChatRequest(BaseModel):
    topic: str
    current_step_title: str = Field(..., alias="currentStepTitle")
    current_step_content: str = Field("", alias="currentStepContent")
    question: str = Field(..., min_length=1)
    history: List[ChatMessage] = Field(default_factory=list)

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "topic": "Recursion",
                    "currentStepTitle": "Base Cases",
                    "currentStepContent": "Every recursive function needs...",
                    "question": "Why does a missing base case overflow the stack?",
                    "history": [
                        {"role": "user", "content": "What is a call stack?"},
                        {"role": "assistant", "content": "A call stack is..."}
                    ]
                }
            ]
        }
    )


class ChatResponse(BaseModel):
    answer: str
