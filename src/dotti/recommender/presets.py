"""Project presets for ``dotti init`` — a typical stack run through the normal engine."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from dotti.schemas.tech_stack import FileTreeFacts, Language, TechStackSnapshot, ToolInfo

_TS = Language(name="TypeScript", file_count=1, extensions=(".ts", ".tsx"))
_PY = Language(name="Python", file_count=1, extensions=(".py",))


class Preset(BaseModel):
    """A named stack that stands in for a real scan."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    tags: tuple[str, ...] = ()
    snapshot: TechStackSnapshot

    def snapshot_for(self, project_name: str) -> TechStackSnapshot:
        return self.snapshot.model_copy(update={"project_name": project_name})


PRESETS: tuple[Preset, ...] = (
    Preset(
        id="react-saas",
        name="React SaaS",
        description="React + TypeScript + Tailwind + Prisma + Auth",
        tags=("react", "typescript", "tailwind", "prisma", "saas"),
        snapshot=TechStackSnapshot(
            languages=(_TS,),
            frameworks=(ToolInfo(name="React"), ToolInfo(name="Express")),
            testing=(ToolInfo(name="Vitest", kind="unit"),),
            databases=(ToolInfo(name="Prisma"),),
            styling=(ToolInfo(name="Tailwind CSS"),),
            package_manager="npm",
        ),
    ),
    Preset(
        id="nextjs-app",
        name="Next.js App",
        description="Next.js 14+ with App Router, RSC, and API routes",
        tags=("nextjs", "react", "typescript", "app-router"),
        snapshot=TechStackSnapshot(
            languages=(_TS,),
            frameworks=(ToolInfo(name="Next.js"), ToolInfo(name="React")),
            testing=(ToolInfo(name="Playwright", kind="e2e"),),
            styling=(ToolInfo(name="Tailwind CSS"),),
            package_manager="pnpm",
        ),
    ),
    Preset(
        id="cli-tool",
        name="CLI Tool",
        description="Node.js CLI with Commander + TypeScript",
        tags=("cli", "nodejs", "typescript"),
        snapshot=TechStackSnapshot(
            languages=(_TS,),
            testing=(ToolInfo(name="Vitest", kind="unit"),),
            package_manager="npm",
        ),
    ),
    Preset(
        id="python-api",
        name="Python API",
        description="FastAPI service with SQLAlchemy, pytest and Docker",
        tags=("python", "fastapi", "sqlalchemy"),
        snapshot=TechStackSnapshot(
            languages=(_PY,),
            frameworks=(ToolInfo(name="FastAPI"),),
            testing=(ToolInfo(name="pytest", kind="unit"),),
            databases=(ToolInfo(name="SQLAlchemy"),),
            deployment=(ToolInfo(name="Docker"),),
            package_manager="uv",
            file_tree=FileTreeFacts(significant_paths=("Database migrations",)),
        ),
    ),
)


def get_preset(preset_id: str) -> Preset | None:
    return next((p for p in PRESETS if p.id == preset_id), None)
