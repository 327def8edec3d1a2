"""Bundled curriculum source: mood/tense rows per CEFR level.

Later levels repeat earlier tenses as review rows, and some rows use the
Spanish mood names. The curriculum processor resolves both.
"""

from __future__ import annotations


def _row(mood: str, tense: str, level: str, target: str) -> dict[str, str]:
    return {"mood": mood, "tense": tense, "level": level, "target": target}


DEFAULT_CURRICULUM: tuple[dict[str, str], ...] = (
    # A1
    _row("indicative", "pres", "A1", "Presente de indicativo: rutinas y descripciones"),
    _row("nonfinite", "ger", "A1", "Gerundio con estar"),
    _row("nonfinite", "part", "A1", "Participio como adjetivo"),
    _row("nonfinite", "nonfiniteMixed", "A1", "Formas no personales mezcladas"),
    _row("Indicativo", "pres", "A1", "Presente de verbos irregulares frecuentes"),
    # A2
    _row("indicativo", "pretIndef", "A2", "Pretérito indefinido: acciones acabadas"),
    _row("indicative", "impf", "A2", "Imperfecto: descripciones en el pasado"),
    _row("indicative", "fut", "A2", "Futuro simple: planes y predicciones"),
    _row("imperative", "impAff", "A2", "Imperativo afirmativo"),
    _row("indicative", "pres", "A2", "Repaso del presente"),
    # B1
    _row("indicative", "pretPerf", "B1", "Pretérito perfecto"),
    _row("indicative", "plusc", "B1", "Pluscuamperfecto"),
    _row("indicative", "futPerf", "B1", "Futuro perfecto"),
    _row("subjuntivo", "subjPres", "B1", "Presente de subjuntivo: deseos y dudas"),
    _row("subjunctive", "subjPerf", "B1", "Pretérito perfecto de subjuntivo"),
    _row("imperative", "impNeg", "B1", "Imperativo negativo"),
    _row("imperative", "impMixed", "B1", "Imperativo afirmativo y negativo"),
    _row("conditional", "cond", "B1", "Condicional simple"),
    _row("indicative", "pretIndef", "B1", "Repaso: indefinido frente a imperfecto"),
    _row("indicative", "impf", "B1", "Repaso: imperfecto narrativo"),
    # B2
    _row("subjunctive", "subjImpf", "B2", "Imperfecto de subjuntivo"),
    _row("subjunctive", "subjPlusc", "B2", "Pluscuamperfecto de subjuntivo"),
    _row("condicional", "condPerf", "B2", "Condicional compuesto"),
    _row("subjunctive", "subjPres", "B2", "Repaso: subjuntivo en oraciones subordinadas"),
    _row("indicative", "plusc", "B2", "Repaso: pluscuamperfecto en narración"),
    _row("conditional", "cond", "B2", "Repaso: condicional de cortesía"),
    # C1
    _row("subjunctive", "subjImpf", "C1", "Oraciones condicionales irreales"),
    _row("subjunctive", "subjPlusc", "C1", "Condicionales en el pasado"),
    _row("conditional", "condPerf", "C1", "Hipótesis sobre el pasado"),
    _row("subjunctive", "subjPres", "C1", "Subjuntivo con expresiones de valoración"),
    _row("indicative", "pretPerf", "C1", "Contraste de pasados"),
    _row("indicative", "futPerf", "C1", "Futuro de probabilidad"),
    # C2
    _row("subjunctive", "subjPlusc", "C2", "Registro formal y literario"),
    _row("subjunctive", "subjImpf", "C2", "Concordancia temporal avanzada"),
    _row("conditional", "condPerf", "C2", "Matices de hipótesis"),
    _row("indicative", "plusc", "C2", "Narración compleja"),
    _row("imperative", "impMixed", "C2", "Mandatos en discurso indirecto"),
)
