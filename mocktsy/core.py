import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .allocator import ImagePools
from .catalog import MOCKUP_CATALOG, MockupDefinition
from .exporter import ProgressCallback, archive_entries, export_all, export_pdf, slugify, write_archive
from .images import DEFAULT_TIMEOUT, ImageLoader
from .plan import BuildPlan, build_plan, with_default_copy
from .render import DEFAULT_PROFILE, EXPORT_PROFILES, FontChoices, OutputSize


class JobError(ValueError):
    pass


@dataclass
class MockupJob:
    collection_name: str
    selected_ids: List[int]
    pools: ImagePools
    field_values: Dict[str, str]
    size: OutputSize
    logo: Optional[str] = None
    heading_font: Optional[str] = None
    body_font: Optional[str] = None
    use_default_copy: bool = False
    # Relative local image paths resolve against this directory.
    base_dir: Optional[Path] = None

    @property
    def slug(self) -> str:
        return slugify(self.collection_name)


@dataclass
class PipelineResult:
    plan: BuildPlan
    plan_path: Path
    archive_path: Path
    pdf_path: Optional[Path] = None
    entries: List[str] = field(default_factory=list)


def resolve_size(data: Mapping[str, Any]) -> OutputSize:
    size = data.get("size")
    if size:
        try:
            return OutputSize(int(size["width"]), int(size["height"]))
        except (KeyError, TypeError, ValueError) as exc:
            raise JobError(f"Invalid size {size!r}: expected {{width, height}}") from exc

    profile = data.get("profile") or DEFAULT_PROFILE
    if profile not in EXPORT_PROFILES:
        raise JobError(f"Unknown export profile '{profile}'. Available: {', '.join(EXPORT_PROFILES)}")
    return EXPORT_PROFILES[profile]


def parse_job(data: Mapping[str, Any], base_dir: Optional[Path] = None) -> MockupJob:
    collection_name = str(data.get("collection_name") or "").strip()
    if not collection_name:
        raise JobError("Job is missing 'collection_name'")

    try:
        selected_ids = [int(i) for i in data.get("selected_ids") or []]
    except (TypeError, ValueError) as exc:
        raise JobError(f"'selected_ids' must be integers: {exc}") from exc

    field_values = {str(k): "" if v is None else str(v) for k, v in (data.get("field_values") or {}).items()}
    # The set name doubles as the hero title unless the job overrides it.
    field_values.setdefault("clipart_title", collection_name)

    return MockupJob(
        collection_name=collection_name,
        selected_ids=selected_ids,
        pools=ImagePools.from_dict(data.get("pools") or {}),
        field_values=field_values,
        size=resolve_size(data),
        logo=data.get("logo") or None,
        heading_font=data.get("heading_font") or None,
        body_font=data.get("body_font") or None,
        use_default_copy=bool(data.get("use_default_copy", False)),
        base_dir=base_dir,
    )


def load_job(path: Path) -> MockupJob:
    with path.open("r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as exc:
            raise JobError(f"{path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise JobError(f"{path} must contain a JSON object")
    return parse_job(data, base_dir=path.parent)


class MockupPipeline:
    """
    Orchestrates one export:
    - load the job file
    - build the plan (allocation, palette, text) and save it as JSON
    - render every planned mockup into a ZIP under {output_root}/{slug}/
    - optionally render the same plan into a multi-page PDF
    """

    def __init__(
        self,
        output_root: Path,
        catalog: Mapping[int, MockupDefinition] = MOCKUP_CATALOG,
        fonts: Optional[FontChoices] = None,
        timeout: float = DEFAULT_TIMEOUT,
        write_pdf: bool = False,
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        self.output_root = output_root
        self.catalog = catalog
        self.fonts = fonts or FontChoices()
        self.timeout = timeout
        self.write_pdf = write_pdf
        self.on_progress = on_progress

    def build(self, job: MockupJob, loader: Optional[ImageLoader] = None) -> BuildPlan:
        values = with_default_copy(job.field_values) if job.use_default_copy else job.field_values
        return build_plan(
            job.selected_ids,
            job.pools,
            values,
            catalog=self.catalog,
            loader=loader or self._loader(job),
        )

    def run(self, job_path: Path) -> PipelineResult:
        job = load_job(job_path)
        return self.run_job(job)

    def run_job(self, job: MockupJob) -> PipelineResult:
        loader = self._loader(job)
        plan = self.build(job, loader=loader)

        skipped = [mid for mid in job.selected_ids if mid not in self.catalog]
        if skipped:
            print(f"⚠️  Ignoring unknown mockup ids: {skipped}")
        print(f"🧩 Planned {len(plan.items)} mockup(s) for '{job.collection_name}'")

        out_dir = self.output_root / job.slug
        out_dir.mkdir(parents=True, exist_ok=True)
        plan_path = out_dir / f"{job.slug}-build-plan.json"
        plan_path.write_text(plan.to_json(), encoding="utf-8")

        fonts = FontChoices(
            heading_font_path=job.heading_font or self.fonts.heading_font_path,
            body_font_path=job.body_font or self.fonts.body_font_path,
        )
        archive = export_all(
            plan.items,
            job.size,
            job.collection_name,
            catalog=self.catalog,
            logo_ref=job.logo,
            fonts=fonts,
            loader=loader,
            on_progress=self.on_progress,
        )
        archive_path = write_archive(archive, out_dir, job.collection_name)

        pdf_path = None
        if self.write_pdf:
            pdf = export_pdf(
                plan.items,
                job.size,
                catalog=self.catalog,
                logo_ref=job.logo,
                fonts=fonts,
                loader=loader,
            )
            if pdf:
                pdf_path = write_archive(pdf, out_dir, job.collection_name, suffix="mockups.pdf")

        entries = archive_entries(archive)
        if len(entries) < len(plan.items):
            print(f"⚠️  Archive holds {len(entries)} of {len(plan.items)} mockups")

        return PipelineResult(
            plan=plan,
            plan_path=plan_path,
            archive_path=archive_path,
            pdf_path=pdf_path,
            entries=entries,
        )

    def _loader(self, job: MockupJob) -> ImageLoader:
        return ImageLoader(base_dir=job.base_dir, timeout=self.timeout)
