"""Default level catalog for the five number games.

``game-calculos`` packs three operations into one game: levels 1-3 are
additions, 4-6 subtractions and 7-9 multiplications.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.level_definition import LevelDefinition
from app.services.level_catalog import (
    ARITHMETIC_GAME_KEY,
    ARITHMETIC_OPERATIONS,
    display_level,
    operation_level_range,
)

_DIFFICULTIES = ("Fácil", "Intermedio", "Avanzado")


def _levels(game: str, rows: list[tuple[str, str, dict]]) -> list[dict]:
    return [
        {
            "id": f"level-{game}-{i}",
            "game_id": f"game-{game}",
            "level": i,
            "name": name,
            "description": description,
            "difficulty": _DIFFICULTIES[(i - 1) % 3],
            "activities_count": 5,
            "config": config,
        }
        for i, (name, description, config) in enumerate(rows, start=1)
    ]


_CALCULOS_STYLE = {
    "suma": ("Sumas", "➕"),
    "resta": ("Restas", "➖"),
    "multiplicacion": ("Multiplicación", "✖️"),
}
_CALCULOS_DESCRIPTIONS = (
    "¡Principiante! Operaciones simples",
    "¡Intermedio! Un poco más difícil",
    "¡Experto! El desafío máximo",
)
_CALCULOS_RANGES = {
    "suma": [
        {"min": 10, "max": 50, "minResult": 20, "maxResult": 100},
        {"min": 100, "max": 600, "minResult": 200, "maxResult": 1200},
        {"min": 1000, "max": 5000, "minResult": 2000, "maxResult": 10000},
    ],
    "resta": [
        {"min": 20, "max": 100, "minResult": 10, "maxResult": 50},
        {"min": 200, "max": 800, "minResult": 100, "maxResult": 500},
        {"min": 2000, "max": 7000, "minResult": 1000, "maxResult": 5000},
    ],
    "multiplicacion": [
        {"min": 2, "max": 10, "minResult": 4, "maxResult": 100},
        {"min": 2, "max": 10, "minResult": 4, "maxResult": 100, "hasUnknown": True},
        {
            "min": 10,
            "max": 1000,
            "minResult": 100,
            "maxResult": 100000,
            "multiplier": [10, 100, 1000],
        },
    ],
}


def _calculos_levels() -> list[dict]:
    levels = []
    for operation in ARITHMETIC_OPERATIONS:
        label, icon = _CALCULOS_STYLE[operation]
        for level in operation_level_range(operation):
            step = display_level(level)
            levels.append(
                {
                    "id": f"level-{ARITHMETIC_GAME_KEY}-{operation}-{step}",
                    "game_id": f"game-{ARITHMETIC_GAME_KEY}",
                    "level": level,
                    "name": f"Nivel {step} - {label}",
                    "description": _CALCULOS_DESCRIPTIONS[step - 1],
                    "difficulty": _DIFFICULTIES[step - 1],
                    "activities_count": 5,
                    "config": {
                        "operation": operation,
                        "icon": icon,
                        **_CALCULOS_RANGES[operation][step - 1],
                    },
                }
            )
    return levels


SEED_LEVELS: list[dict] = [
    *_levels("ordenamiento", [
        ("Nivel 1", "Números de 3 dígitos", {"min": 100, "max": 999, "color": "blue", "numbersCount": 6}),
        ("Nivel 2", "Números de 4 dígitos", {"min": 1000, "max": 9999, "color": "green", "numbersCount": 6}),
        ("Nivel 3", "Números de 5 dígitos", {"min": 10000, "max": 99999, "color": "purple", "numbersCount": 6}),
    ]),
    *_levels("descomposicion", [
        ("Fácil", "0 al 99", {"min": 10, "max": 99, "color": "chocolate", "range": "0 al 99"}),
        ("Intermedio", "100 al 999", {"min": 100, "max": 999, "color": "terracotta", "range": "100 al 999"}),
        ("Avanzado", "1.000 al 9.999", {"min": 1000, "max": 9999, "color": "chocolate", "range": "1.000 al 9.999"}),
    ]),
    *_levels("escala", [
        ("Vecinos Cercanos", "Encuentra el anterior y posterior (+1 y -1)",
         {"min": 5, "max": 95, "operation": 1, "color": "blue", "range": "1 al 100"}),
        ("Saltos de 10", "Encuentra el anterior y posterior (+10 y -10)",
         {"min": 30, "max": 490, "operation": 10, "color": "green", "range": "20 al 500"}),
        ("Grandes Saltos", "Encuentra el anterior y posterior (+100 y -100)",
         {"min": 300, "max": 900, "operation": 100, "color": "purple", "range": "200 al 1000"}),
    ]),
    *_levels("escritura", [
        ("Nivel 1", "Números del 1 al 50", {"min": 1, "max": 50, "color": "blue"}),
        ("Nivel 2", "Números del 51 al 200", {"min": 51, "max": 200, "color": "green"}),
        ("Nivel 3", "Números del 201 al 500", {"min": 201, "max": 500, "color": "purple"}),
    ]),
    *_calculos_levels(),
]


async def seed_levels(session: AsyncSession, levels: list[dict] = SEED_LEVELS) -> tuple[int, int]:
    """Insert or update catalog rows by id. Returns (inserted, updated)."""
    inserted = updated = 0
    for level_data in levels:
        result = await session.execute(
            select(LevelDefinition).where(LevelDefinition.id == level_data["id"])
        )
        existing = result.scalar_one_or_none()
        if existing:
            for key, value in level_data.items():
                setattr(existing, key, value)
            updated += 1
        else:
            session.add(LevelDefinition(**level_data))
            inserted += 1
    await session.commit()
    return inserted, updated
