"""Run states exposed to the presentation layer.

Each phase is its own model carrying only the data that phase has, so a
label can never disagree with its progress or payload.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field

from app.rss.models import Headline

STATUS_LABELS = {
    "idle": "वीडियो बनाने के लिए नीचे क्लिक करें",
    "fetching": "ताज़ा सुर्ख़ियाँ इकट्ठा की जा रही हैं…",
    "rendering": "वीडियो तैयार किया जा रहा है…",
    "done": "वीडियो तैयार है!",
    "error": "कुछ गड़बड़ हो गई। दोबारा प्रयास करें।",
}


class _RunState(BaseModel):
    model_config = ConfigDict(frozen=True)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def label(self) -> str:
        return STATUS_LABELS[self.status]  # type: ignore[attr-defined]


class Idle(_RunState):
    status: Literal["idle"] = "idle"
    progress: int = 0


class Fetching(_RunState):
    status: Literal["fetching"] = "fetching"
    progress: int = Field(default=5, ge=0, le=100)


class Rendering(_RunState):
    status: Literal["rendering"] = "rendering"
    progress: int = Field(default=15, ge=0, le=100)
    headlines: list[Headline]


class Done(_RunState):
    status: Literal["done"] = "done"
    progress: Literal[100] = 100
    headlines: list[Headline]
    video_url: str
    download_url: str


class Failed(_RunState):
    status: Literal["error"] = "error"
    progress: int = Field(default=0, ge=0, le=100)  # where the run stopped
    message: str


RunState = Annotated[
    Union[Idle, Fetching, Rendering, Done, Failed], Field(discriminator="status")
]
