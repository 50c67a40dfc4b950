"""
Settings Endpoints

Company identity/preferences and the dashboard theme colors.
"""

from fastapi import APIRouter, HTTPException, Query
from typing import Optional

from autofix.models.schemas import CompanySettings, ThemeResponse
from autofix.services.shop_data import get_shop_data
from autofix.services.theme import (
    DEFAULT_PRIMARY_COLOR,
    generate_color_ramp,
    theme_css_variables,
)

router = APIRouter()


@router.get("/", response_model=CompanySettings)
async def get_settings():
    """
    Get company settings (defaults when nothing has been saved yet)
    """
    try:
        return await get_shop_data().get_company_settings()
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/", response_model=CompanySettings)
async def update_settings(settings: CompanySettings):
    """
    Save company settings

    - **settings**: name, address, phone, email, website, responsibleName,
      logoUrl (data URL), lowStockThreshold, primaryColor
    """
    try:
        if settings.primary_color:
            generate_color_ramp(settings.primary_color)
        return await get_shop_data().save_company_settings(settings)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/theme", response_model=ThemeResponse)
async def get_theme(
    color: Optional[str] = Query(None, description="Base color (hex); defaults to the saved primary color")
):
    """
    Primary color ramp (50, 100, 500, 600, 700) and matching CSS variables

    - **color**: e.g. `#3b82f6` or `3b82f6`
    """
    try:
        if not color:
            settings = await get_shop_data().get_company_settings()
            color = settings.primary_color or DEFAULT_PRIMARY_COLOR
        shades = generate_color_ramp(color)
        return ThemeResponse(
            base_color=shades["500"],
            shades=shades,
            css=theme_css_variables(color)
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
