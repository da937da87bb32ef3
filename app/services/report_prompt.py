"""Prompt assembly for the narrative progress report shown to course staff."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime

from app.schemas import Attempt, StudentAggregate
from app.services.level_catalog import ARITHMETIC_GAME_KEY, display_level, operation_for_level
from app.services.statistics import normalize_game_id

GAME_NAMES: dict[str, str] = {
    "ordenamiento": "Ordenamiento",
    "escritura": "Escritura",
    "descomposicion": "Descomposición",
    "escala": "Escala Numérica",
    "calculos": "Cálculos",
}


@dataclass(frozen=True)
class RecentWindow:
    """Activity of one game inside the recent-days window."""

    game_key: str
    sessions: int
    points: int
    recent_sessions: int
    recent_points: int
    max_unlocked_level: int


def summarize_window(records: Sequence[Attempt], window_start: datetime) -> list[RecentWindow]:
    groups: dict[str, list[Attempt]] = defaultdict(list)
    for record in records:
        groups[normalize_game_id(record.game_id)].append(record)

    windows = []
    for key, group in sorted(groups.items()):
        recent = [r for r in group if r.created_at >= window_start]
        windows.append(
            RecentWindow(
                game_key=key,
                sessions=len(group),
                points=sum(r.points for r in group),
                recent_sessions=len(recent),
                recent_points=sum(r.points for r in recent),
                max_unlocked_level=max(r.max_unlocked_level for r in group),
            )
        )
    return windows


def level_label(game_key: str, level: int) -> str:
    """Level as players see it; calculos levels restart at 1 per operation."""
    if game_key == ARITHMETIC_GAME_KEY:
        operation = operation_for_level(level)
        if operation is not None:
            return f"{display_level(level)} ({operation})"
    return str(level)


def build_report_prompt(
    *,
    records: Sequence[Attempt],
    summary: StudentAggregate,
    progress_percentages: Mapping[str, float],
    windows: Sequence[RecentWindow],
    recent_days: int,
) -> str:
    """Build the Spanish prompt sent to the text generator.

    The prompt never contains the student's name.
    """
    per_game = []
    for key, progress in summary.progress_by_game.items():
        name = GAME_NAMES.get(key, key)
        per_game.append(
            f"- {name}:\n"
            f"  * Actividades completadas: {progress.completed}\n"
            f"  * Tiempo total invertido: {round(progress.total_time / 60)} minutos\n"
            f"  * Progreso: {round(progress_percentages.get(key, 0))}%\n"
            f"  * Precisión: {progress.average_score}%\n"
            f"  * Total de reintentos: {progress.total_attempts}"
        )

    recent = [
        f"- {GAME_NAMES.get(w.game_key, w.game_key)}: {w.recent_sessions} sesiones, "
        f"{w.recent_points} puntos (nivel máximo desbloqueado: "
        f"{level_label(w.game_key, w.max_unlocked_level)})"
        for w in windows
        if w.recent_sessions
    ] or ["- Sin actividad en el período"]

    completed = sum(1 for r in records if r.is_completed)
    total_points = sum(r.points for r in records)
    total_attempts = sum(r.attempts for r in records)
    last_activity = summary.last_activity[:10] if summary.last_activity else "Sin registros"

    return f"""Eres un tutor pedagógico especializado en matemática para nivel primario que redacta reportes pedagógicos detallados en español.

ESTADÍSTICAS POR JUEGO:

{chr(10).join(per_game)}

ACTIVIDAD DE LOS ÚLTIMOS {recent_days} DÍAS:

{chr(10).join(recent)}

MÉTRICAS GENERALES:
- Juegos jugados: {summary.total_games_played}
- Total de actividades completadas: {completed}
- Puntos totales acumulados: {total_points}
- Precisión promedio: {summary.average_score}%
- Total de reintentos: {total_attempts}
- Última actividad: {last_activity}

INSTRUCCIONES PARA EL REPORTE:

Genera un reporte pedagógico con estas secciones, en este orden y con estos títulos exactos:

1. **Resumen General del Estudiante**: visión general del desempeño en 2-3 oraciones, con fortalezas y áreas de mejora.
2. **🌟 Puntos Fuertes**: juegos con mejor desempeño (alto progreso, pocos reintentos, tiempo eficiente), citando el progreso porcentual.
3. **⚠️ A Reforzar**: juegos con dificultades y qué indicadores lo muestran.
4. **💡 Recomendación**: una recomendación concreta y accionable para el docente (máximo 2-3 oraciones).

IMPORTANTE:
- NO uses nombres propios; usa referencias genéricas como "el estudiante" o "el alumno".
- Sé específico con porcentajes, cantidades de actividades y reintentos.
- Si hay muchos reintentos con bajo progreso, sugiere que puede estar adivinando; si hay poco tiempo con alto progreso, destaca la eficiencia.
- Máximo 1 párrafo por sección."""
