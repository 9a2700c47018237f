from typing import Optional, Protocol

from pydantic import BaseModel, ConfigDict

from invoice_engine.app.schemas.documents import DocumentFacts, PartyProfile
from invoice_engine.app.schemas.rendered import RenderedDocument
from invoice_engine.app.schemas.template_config import TemplateConfiguration
from invoice_engine.app.tax.aggregator import TaxBreakdown


class RenderInput(BaseModel):
    """
    Everything a renderer needs, precomputed.

    Renderers never aggregate taxes or resolve legal mentions themselves.
    ``legal_text`` is the text to print when the legal mentions section
    is visible (normally the configuration's materialized text).
    """

    facts: DocumentFacts
    client: Optional[PartyProfile] = None
    issuer: Optional[PartyProfile] = None
    tax: TaxBreakdown
    legal_text: str = ""

    model_config = ConfigDict(frozen=True, extra="forbid")


class Renderer(Protocol):
    """
    Interface of a layout architecture.

    A renderer:
    - is a pure function of its inputs
    - honors ``config.sections`` strictly
    - MUST NOT raise for missing optional data (the block is omitted)
    - MUST NOT compute tax or legal text
    """

    def __call__(
        self,
        data: RenderInput,
        config: TemplateConfiguration,
    ) -> RenderedDocument:
        ...
