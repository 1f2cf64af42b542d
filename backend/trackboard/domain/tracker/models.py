"""Task and workout domain models. Pure Python, no DB or HTTP dependencies."""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

PRIORITIES = ("low", "medium", "high")
EXERCISE_TYPES = ("count", "time")
EXERCISE_CATEGORIES = ("warmup", "main", "cardio")


@dataclass
class Task:
    id: str
    user_id: str
    title: str
    date: datetime  # local midnight
    description: str = ""
    completed: bool = False
    priority: str = "medium"
    order: int = 0
    created_at: str = ""
    updated_at: str = ""


@dataclass
class TemplateExercise:
    name: str
    type: str  # count | time
    category: str = "main"
    order: int = 0
    default_sets: Optional[int] = None
    default_reps: Optional[int] = None
    default_weight: Optional[float] = None
    default_time: Optional[float] = None  # minutes
    # Addresses one exercise inside its template
    id: str = ""


@dataclass
class WorkoutTemplate:
    id: str
    name: str
    exercises: List[TemplateExercise] = field(default_factory=list)
    created_at: str = ""
    updated_at: str = ""


@dataclass
class ExerciseSet:
    reps: Optional[int] = None
    weight: Optional[float] = None


@dataclass
class PerformedExercise:
    name: str
    type: str  # count | time
    sets: List[ExerciseSet] = field(default_factory=list)
    time: Optional[float] = None  # minutes
    notes: str = ""


@dataclass
class WorkoutLog:
    id: str
    user_id: str
    date: datetime  # local midnight, one log per (user_id, date)
    workout_template_id: Optional[str]
    exercises: List[PerformedExercise] = field(default_factory=list)
    completed: bool = False
    created_at: str = ""
    updated_at: str = ""
    # Filled in by the repository when the template still exists
    workout_name: Optional[str] = None
