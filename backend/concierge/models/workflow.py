# /concierge/models/workflow.py

from typing import Optional, List, Dict, Any, Literal, Union, Annotated
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel

from concierge.config import strings

_CAMEL = dict(alias_generator=to_camel, populate_by_name=True)


# ---------------- Catalog definitions (read-only) ---------------- #

class Option(BaseModel):
    model_config = ConfigDict(frozen=True, **_CAMEL)

    id: str
    label: str
    icon: str
    subtitle: Optional[str] = None
    exclusive: bool = False


class Question(BaseModel):
    model_config = ConfigDict(frozen=True, **_CAMEL)

    id: str
    question: str
    type: Literal["single_select", "multi_select"]
    subtitle: Optional[str] = None
    options: List[Option]

    def option(self, option_id: str) -> Optional[Option]:
        return next((o for o in self.options if o.id == option_id), None)


class Intro(BaseModel):
    model_config = ConfigDict(frozen=True, **_CAMEL)

    title: str
    subtitle: str
    instruction: Optional[str] = None


class Recap(BaseModel):
    model_config = ConfigDict(frozen=True, **_CAMEL)

    title: str
    closing: str
    button: str


DEFAULT_RECAP = Recap(
    title=strings.DEFAULT_RECAP_TITLE,
    closing=strings.DEFAULT_RECAP_CLOSING,
    button=strings.DEFAULT_RECAP_BUTTON,
)


class WorkflowDefinition(BaseModel):
    """A vendor-qualifying flow: intro, ordered questions, optional recap."""
    model_config = ConfigDict(frozen=True, **_CAMEL)

    workflow_id: str
    intro: Intro
    questions: List[Question]
    recap: Optional[Recap] = None
    matching: Dict[str, float] = Field(default_factory=dict)
    fallback: bool = False

    def recap_or_default(self) -> Recap:
        return self.recap or DEFAULT_RECAP

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class MiniAssessmentQuestion(BaseModel):
    model_config = ConfigDict(frozen=True, **_CAMEL)

    id: str
    question: str
    icon: str
    # Display name used when the user says yes without naming anything
    label: str
    text_entry_prompt: Optional[str] = None
    text_entry_placeholder: Optional[str] = None
    allow_multiple: bool = False


class Review(BaseModel):
    model_config = ConfigDict(frozen=True, **_CAMEL)

    title: str
    subtitle: str
    confirm_text: str
    edit_text: str


class TaskTemplate(BaseModel):
    model_config = ConfigDict(frozen=True, **_CAMEL)

    title_prefix: str
    category: str
    subcategory: str
    priority: int
    subtitle: str = strings.MINI_ASSESSMENT_TASK_SUBTITLE


class MiniAssessmentDefinition(BaseModel):
    model_config = ConfigDict(frozen=True, **_CAMEL)

    id: str
    title: str
    task_title: str
    category: str = "address_change"
    intro: Intro
    questions: List[MiniAssessmentQuestion]
    review: Review
    task_template: TaskTemplate

    def question(self, question_id: str) -> Optional[MiniAssessmentQuestion]:
        return next((q for q in self.questions if q.id == question_id), None)

    def to_payload(self) -> Dict[str, Any]:
        """Same envelope as a vendor workflow so one client renderer handles both."""
        return {
            "workflowId": self.id,
            "title": self.title,
            "intro": self.intro.model_dump(by_alias=True, exclude_none=True),
            "questions": [
                {
                    "id": q.id,
                    "question": q.question,
                    "icon": q.icon,
                    "options": None,
                    "textEntryPrompt": q.text_entry_prompt,
                    "textEntryPlaceholder": q.text_entry_placeholder,
                    "allowMultiple": q.allow_multiple,
                }
                for q in self.questions
            ],
            "recap": None,
            "review": self.review.model_dump(by_alias=True),
            "taskTemplate": self.task_template.model_dump(by_alias=True),
        }


# ---------------- Client-held sessions ---------------- #

class IntroState(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["intro"] = "intro"


class QuestionState(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["question"] = "question"
    index: int = Field(ge=0)


class RecapState(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["recap"] = "recap"
    # question id -> selected option labels
    summary: Dict[str, List[str]] = Field(default_factory=dict)


class CompleteState(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["complete"] = "complete"


class CancelledState(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["cancelled"] = "cancelled"


WorkflowState = Annotated[
    Union[IntroState, QuestionState, RecapState, CompleteState, CancelledState],
    Field(discriminator="kind"),
]


class WorkflowSession(BaseModel):
    """
    State of one vendor-qualifying run. Sessions are values: every transition
    returns a new session and the server keeps no copy.
    """
    model_config = ConfigDict(frozen=True, **_CAMEL)

    workflow_id: str
    state: WorkflowState = Field(default_factory=IntroState)
    # question id -> ordered selected option ids
    answers: Dict[str, List[str]] = Field(default_factory=dict)
    # Set after a single-select choice; the question advances once this passes
    advance_due_at: Optional[datetime] = None


class WorkflowAction(BaseModel):
    model_config = ConfigDict(frozen=True, **_CAMEL)

    type: Literal["continue", "select", "confirm", "cancel"]
    option_id: Optional[str] = None


class MiniAssessmentEntry(BaseModel):
    """One named thing (account, provider, membership) that needs a task."""
    model_config = ConfigDict(frozen=True, **_CAMEL)

    id: str
    display_name: str
    question_id: Optional[str] = None
    text_entry: Optional[str] = None


class MiniQuestionState(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["question"] = "question"
    index: int = Field(ge=0)
    # "decide" shows the yes/no card, "entry" the free-text capture
    phase: Literal["decide", "entry"] = "decide"


class ReviewState(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["review"] = "review"


MiniAssessmentState = Annotated[
    Union[IntroState, MiniQuestionState, ReviewState, CompleteState, CancelledState],
    Field(discriminator="kind"),
]


class MiniAssessmentSession(BaseModel):
    model_config = ConfigDict(frozen=True, **_CAMEL)

    workflow_id: str
    state: MiniAssessmentState = Field(default_factory=IntroState)
    entries: List[MiniAssessmentEntry] = Field(default_factory=list)


class MiniAssessmentAction(BaseModel):
    model_config = ConfigDict(frozen=True, **_CAMEL)

    type: Literal["continue", "yes", "no", "add_entry", "remove_entry", "confirm", "cancel"]
    text: Optional[str] = None
    entry_id: Optional[str] = None
