"""
Category schema registry: one layout per category tag.

New categories are added to CATEGORY_SCHEMAS; extraction code never branches
on a specific tag.
"""
from __future__ import annotations

from typing import Union

from rostermatch.data.schemas import CategorySchema, CategoryTag, HeaderRule
from rostermatch.errors import SchemaUnknown


_MONITORING = CategorySchema(
    sheet_index=0,
    id_columns=(11,),
    skip_rows=1,
    header_rule=HeaderRule(),
)

CATEGORY_SCHEMAS: dict[CategoryTag, CategorySchema] = {
    CategoryTag.POVERTY_ALLEVIATED_CONTINUE_POLICY: CategorySchema(sheet_index=0, id_columns=(7,)),
    CategoryTag.POVERTY_ALLEVIATED_NO_POLICY: CategorySchema(sheet_index=0, id_columns=(7,)),
    CategoryTag.DISABLED_WITH_CERTIFICATE: CategorySchema(sheet_index=0, id_columns=(1,), name_column=0),
    # Household filing sheets: head of household, then one column per member
    CategoryTag.RURAL_MINIMUM_LIVING: CategorySchema(
        sheet_index=1,
        id_columns=(6, 15, 17, 19, 21, 23, 25, 27, 29),
        skip_rows=2,
    ),
    CategoryTag.URBAN_MINIMUM_LIVING: CategorySchema(
        sheet_index=1,
        id_columns=(6, 16, 18, 20, 22, 24),
        skip_rows=2,
    ),
    CategoryTag.RURAL_SPECIAL_DIFFICULTY: CategorySchema(
        sheet_index=1,
        id_columns=(5, 26, 31, 33, 35, 37, 39, 41),
        skip_rows=3,
    ),
    CategoryTag.MONITORING_RISK_NOT_ELIMINATED: _MONITORING,
    CategoryTag.MONITORING_RISK_ELIMINATED: _MONITORING,
    # Orphans on sheet 0, children without de facto guardians on sheet 2
    CategoryTag.ORPHAN_OR_UNSUPPORTED_CHILD: CategorySchema(
        sheet_index=0,
        extra_sheet_indices=(2,),
        id_columns=(2,),
        skip_rows=3,
        name_column=1,
        strip_prefix=True,
    ),
    CategoryTag.LOW_INCOME_POPULATION: CategorySchema(
        sheet_index=0,
        id_columns=(3,),
        name_column=2,
        capture_extra=True,
    ),
}


def all_tags() -> list[CategoryTag]:
    """Every category tag, in registry order."""
    return list(CATEGORY_SCHEMAS)


def parse_tag(value: Union[CategoryTag, str]) -> CategoryTag:
    """Resolve a tag from the enum itself, its label, or its member name."""
    if isinstance(value, CategoryTag):
        return value
    text = str(value).strip()
    try:
        return CategoryTag(text)
    except ValueError:
        pass
    member = CategoryTag.__members__.get(text.upper().replace("-", "_"))
    if member is None:
        raise SchemaUnknown(value, known=[t.value for t in CategoryTag])
    return member


def schema_for(tag: Union[CategoryTag, str]) -> CategorySchema:
    """Layout for a category. Total over CategoryTag."""
    resolved = parse_tag(tag)
    try:
        return CATEGORY_SCHEMAS[resolved]
    except KeyError:
        raise SchemaUnknown(resolved) from None
