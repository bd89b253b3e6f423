from typing import Annotated, List, Optional

from pydantic import BaseModel, Field, StringConstraints

IMAGE_DATA_URI_PATTERN = r"^data:image/[\w.+-]+;base64,[A-Za-z0-9+/=\s]+$"

ImageDataUri = Annotated[str, StringConstraints(pattern=IMAGE_DATA_URI_PATTERN)]


class CaptionRequest(BaseModel):
    photo_data_uri: str = Field(
        ...,
        min_length=1,
        description="Photo to caption as a data URI, e.g. 'data:image/jpeg;base64,<payload>'.",
    )


class CaptionResponse(BaseModel):
    caption: str = Field(..., min_length=1)


class LogoRequest(BaseModel):
    niche: str = Field(..., min_length=1, description="Primary niche or industry for the brand.")
    logo_description: str = Field(
        ...,
        min_length=1,
        description="Desired elements, style, colors and mood of the logo.",
    )
    company_name: Optional[str] = Field(None, description="Optional company name to work into the design.")


class LogoResponse(BaseModel):
    logo_image_data_uri: str = Field(..., pattern=IMAGE_DATA_URI_PATTERN)


class ImageRequest(BaseModel):
    prompt: Optional[str] = Field(None, description="Text prompt for a fresh image.")
    base_image_data_uri: Optional[str] = Field(None, description="Image to edit, as a data URI.")
    edit_instruction: Optional[str] = Field(None, description="How to change the base image.")
    logo_image_url: Optional[str] = Field(
        None,
        description="Public URL (or data URI) of a logo to place in the image. Dropped if malformed.",
    )


class ImageResponse(BaseModel):
    image_data_uris: List[ImageDataUri] = Field(..., min_length=1, max_length=1)


class PostDetailsRequest(BaseModel):
    niche: str = Field(..., min_length=1, description="Niche or topic of the post.")
    category: Optional[str] = Field(None, description="Content category, e.g. 'Fitness' or 'Travel'.")
    image_description: Optional[str] = Field(None, description="What the post graphic should show.")
    logo_url: Optional[str] = Field(None, description="Logo to feature on the graphic. Dropped if malformed.")
    contact_info: Optional[str] = Field(None, description="Website, handle or phone to show on the graphic.")
    hook_style: Optional[str] = Field(None, description="Hook or thread style for the captions.")


class PostDetailsDraft(BaseModel):
    """Fields the model writes in the first stage of the post-details flow."""

    engaging_caption: str = Field(..., min_length=1)
    professional_caption: str = Field(..., min_length=1)
    hashtags: str = Field(..., min_length=1)
    suggested_post_time: str = Field(..., min_length=1)
    headline_text: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)


class PostDetailsResponse(PostDetailsDraft):
    image_generation_prompt: str = Field(..., min_length=1)
    logo_url: Optional[str] = None
