# memegen/api/templates.py
from fastapi import APIRouter

from memegen.data.templates import MemeTemplate, get_random_template, list_templates

router = APIRouter()


@router.get("/v1/templates", response_model=list[MemeTemplate])
def templates():
    return list_templates()


@router.get("/v1/templates/random", response_model=MemeTemplate)
def random_template():
    return get_random_template()
