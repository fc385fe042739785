"""
CV Generation Prompts

One prompt template per CV section. The shop serves the Argentine and
Latin American job market, so prompts and generated text are in Spanish.
"""

import json
from typing import Any, Callable, Dict, Mapping

from backend.jobs.models import CVSection


NOT_SPECIFIED = "No especificado"


# =============================================================================
# Field formatting
# =============================================================================

def _text(submission: Mapping[str, Any], key: str) -> str:
    value = submission.get(key)
    return str(value) if value else NOT_SPECIFIED


def _skills(submission: Mapping[str, Any], key: str) -> str:
    skills = submission.get(key) or []
    if isinstance(skills, str):
        return skills or NOT_SPECIFIED
    return ", ".join(str(s) for s in skills) or NOT_SPECIFIED


def _structured(submission: Mapping[str, Any], key: str, indent: int | None = None) -> str:
    """Render JSON columns (experience, education, languages) for the prompt."""
    value = submission.get(key)
    if not value:
        return NOT_SPECIFIED
    return json.dumps(value, ensure_ascii=False, indent=indent, default=str)


# =============================================================================
# Section templates
# =============================================================================

def build_summary_prompt(submission: Mapping[str, Any]) -> str:
    return f"""Sos un especialista en redacción de CVs para el mercado laboral de Argentina y Latinoamérica.

DATOS DEL CANDIDATO:
- Nombre: {_text(submission, "full_name")}
- Experiencia: {_structured(submission, "experience")}
- Educación: {_structured(submission, "education")}
- Habilidades técnicas: {_skills(submission, "hard_skills")}
- Habilidades blandas: {_skills(submission, "soft_skills")}

TAREA: Escribí un RESUMEN PROFESIONAL de 3 a 4 oraciones que:
1. Presente al candidato con un tono actual y seguro
2. Mencione logros medibles cuando existan
3. Use verbos de acción
4. Sea breve y directo

FORMATO: Texto plano, sin títulos ni viñetas, listo para pegar en el CV."""


def build_experience_prompt(submission: Mapping[str, Any]) -> str:
    return f"""Sos un especialista en redacción de CVs modernos.

EXPERIENCIA LABORAL DEL CANDIDATO (texto original):
{_structured(submission, "experience")}

TAREA: Reescribí cada puesto con este formato:

PUESTO | EMPRESA
Período: [fechas]
Ubicación: [ciudad/remoto]

• [Logro o tarea]
• [Logro o tarea]
• [Logro o tarea]
• [Logro o tarea]
• [Logro o tarea]

REGLAS:
1. Exactamente 5 viñetas por puesto
2. Cada viñeta de 7 u 8 palabras como máximo
3. Las tareas deben corresponder al puesto indicado, nada genérico
4. Verbos de acción en pasado (Diseñé, Lideré, Optimicé)
5. Cuantificá con porcentajes, cifras o métricas cuando sea posible

Devolvé solo el texto listo para copiar en el CV."""


def build_education_prompt(submission: Mapping[str, Any]) -> str:
    return f"""Sos un especialista en redacción de CVs.

EDUCACIÓN DEL CANDIDATO:
{_structured(submission, "education")}

TAREA: Presentá la formación con este formato:

TÍTULO | INSTITUCIÓN
Año de egreso: [año]
[Distinciones relevantes, si hay]

REGLAS:
1. Ordená de la más reciente a la más antigua
2. Indicá el estado (En curso, Graduado, Incompleto)
3. Mantené un formato limpio y uniforme

Devolvé solo el texto listo para copiar en el CV."""


def build_skills_prompt(submission: Mapping[str, Any]) -> str:
    return f"""Sos un especialista en CVs modernos.

HABILIDADES DEL CANDIDATO:
- Técnicas: {_skills(submission, "hard_skills")}
- Blandas: {_skills(submission, "soft_skills")}

TAREA: Organizá las habilidades así:

HABILIDADES TÉCNICAS
• [Habilidad] - [nivel o contexto breve]

HABILIDADES BLANDAS
• [Habilidad] - [ejemplo breve de aplicación]

REGLAS:
1. Priorizá las más valoradas por el mercado actual
2. Agrupá por categoría cuando tenga sentido
3. Usá terminología actual

Devolvé solo el texto listo para copiar en el CV."""


def build_full_cv_prompt(submission: Mapping[str, Any]) -> str:
    return f"""Sos un especialista en redacción de CVs profesionales para el mercado laboral de Argentina y Latinoamérica.

DATOS PERSONALES:
- Nombre completo: {_text(submission, "full_name")}
- Email: {_text(submission, "email")}
- Teléfono: {_text(submission, "phone")}
- Ubicación: {_text(submission, "city")}
- LinkedIn: {_text(submission, "linkedin")}

EXPERIENCIA LABORAL:
{_structured(submission, "experience", indent=2)}

EDUCACIÓN:
{_structured(submission, "education", indent=2)}

HABILIDADES TÉCNICAS:
{_skills(submission, "hard_skills")}

HABILIDADES BLANDAS:
{_skills(submission, "soft_skills")}

IDIOMAS:
{_structured(submission, "languages")}

TAREA: Redactá un CV completo con estas secciones:
1. RESUMEN PROFESIONAL (3 a 4 oraciones)
2. EXPERIENCIA LABORAL (viñetas con logros medibles)
3. EDUCACIÓN
4. HABILIDADES (organizadas y con contexto)
5. IDIOMAS (si corresponde)

REGLAS:
1. Estilo actual y directo
2. Verbos de acción
3. Logros cuantificables cuando sea posible
4. Conciso pero completo

Devolvé el contenido listo para copiar en un CV profesional."""


PROMPT_BUILDERS: Dict[CVSection, Callable[[Mapping[str, Any]], str]] = {
    CVSection.RESUMEN: build_summary_prompt,
    CVSection.EXPERIENCIA: build_experience_prompt,
    CVSection.EDUCACION: build_education_prompt,
    CVSection.HABILIDADES: build_skills_prompt,
    CVSection.ALL: build_full_cv_prompt,
}


def build_prompt(submission: Mapping[str, Any], section: CVSection) -> str:
    """Build the prompt for a section of the given submission."""
    return PROMPT_BUILDERS[section](submission)
