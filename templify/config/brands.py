"""Brand metadata and the catalogue of branded templates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from ..exceptions import ConfigError


@dataclass(frozen=True, slots=True)
class BrandConfig:
    """Legal and visual identity of one organisation."""

    code: str
    full_name: str
    legal_entity: str
    category: str
    cricos: str
    provider_id: str
    abn: str
    acn: str
    website: str
    email: str
    primary_color: str
    secondary_color: str
    # Word package styling
    heading_color_fallback: str = "F04D23"
    forced_heading_color: Optional[str] = None
    title_run_color: Optional[str] = None
    title_wrap_chars: int = 42
    subtitle_wrap_chars: int = 48

    @property
    def name(self) -> str:
        return self.code


@dataclass(frozen=True, slots=True)
class Template:
    """A branded template available as PDF and, optionally, as a DOCX package."""

    id: str
    name: str
    brand: str
    orientation: str
    preview_url: str
    pdf_url: str
    docx_url: Optional[str] = None


BRANDS: Dict[str, BrandConfig] = {
    "IHM": BrandConfig(
        code="IHM",
        full_name="Institute of Health & Management",
        legal_entity="INSTITUTE OF HEALTH & MANAGEMENT PTY LTD.",
        category="Institute of Higher Education",
        cricos="03407G",
        provider_id="PRV14040",
        abn="19 155 760 437",
        acn="155 760 437",
        website="www.ihm.edu.au",
        email="enquiry@ihm.edu.au",
        primary_color="#F15C4E",
        secondary_color="#EDAB37",
        heading_color_fallback="F04D23",
    ),
    "IHNA": BrandConfig(
        code="IHNA",
        full_name="Institute of Health and Nursing Australia",
        legal_entity="HEALTH CAREERS INTERNATIONAL PTY LTD.",
        category="Registered Training Organisation",
        cricos="03386G",
        provider_id="RTO ID: 21985",
        abn="59 106 800 944",
        acn="106 800 944",
        website="www.ihna.edu.au",
        email="enquiry@ihna.edu.au",
        primary_color="#027060",
        secondary_color="#F7941D",
        heading_color_fallback="009690",
        forced_heading_color="009690",
        title_run_color="009690",
    ),
}


TEMPLATES: List[Template] = [
    Template(
        id="ihm-portrait",
        name="Portrait Template",
        brand="IHM",
        orientation="portrait",
        preview_url="/templates/IHM Potrait template.pdf",
        pdf_url="/templates/IHM Potrait template.pdf",
        docx_url="/templates/IHM_Potrait.docx",
    ),
    Template(
        id="ihm-landscape",
        name="Landscape Template",
        brand="IHM",
        orientation="landscape",
        preview_url="/templates/ihm landscape template.pdf",
        pdf_url="/templates/ihm landscape template.pdf",
        docx_url="/templates/IHM_Landscape.docx",
    ),
    Template(
        id="ihna-portrait",
        name="Portrait Template",
        brand="IHNA",
        orientation="portrait",
        preview_url="/templates/IHNA potrait template.pdf",
        pdf_url="/templates/IHNA potrait template.pdf",
        docx_url="/templates/IHNA Potrait.docx",
    ),
    Template(
        id="ihna-landscape",
        name="Landscape Template",
        brand="IHNA",
        orientation="landscape",
        preview_url="/templates/IHNA landscape template.pdf",
        pdf_url="/templates/IHNA landscape template.pdf",
        docx_url="/templates/IHNA Landscape.docx",
    ),
]


def get_brand(code: str) -> BrandConfig:
    """Return the brand registered under ``code``."""
    try:
        return BRANDS[code.upper()]
    except KeyError:
        raise ConfigError("Unknown brand", code) from None


def get_template(template_id: str) -> Template:
    """Return the template with the given identifier."""
    for template in TEMPLATES:
        if template.id == template_id:
            return template
    raise ConfigError("Unknown template", template_id)


def templates_for_brand(code: str) -> List[Template]:
    brand = get_brand(code)
    return [template for template in TEMPLATES if template.brand == brand.code]
