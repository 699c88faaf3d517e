from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache

from bug_tracker.adapters.outbound.in_memory_snapshot_store import InMemorySnapshotStore
from bug_tracker.adapters.outbound.json_snapshot_store import JsonFileSnapshotStore
from bug_tracker.adapters.outbound.yaml_seed_repository import YamlSeedRepository
from bug_tracker.application.ports.seed_data_port import SeedDataPort
from bug_tracker.application.ports.snapshot_store_port import SnapshotStorePort
from bug_tracker.application.services.bug_workflow_engine import BugWorkflowEngine
from bug_tracker.application.services.directory_service import DirectoryService
from bug_tracker.application.services.project_service import ProjectService
from bug_tracker.application.services.tracker_state import TrackerState
from bug_tracker.application.use_cases.assign_bug import AssignBugUseCase
from bug_tracker.application.use_cases.close_bug import CloseBugUseCase
from bug_tracker.application.use_cases.comment_on_bug import CommentOnBugUseCase
from bug_tracker.application.use_cases.create_project import CreateProjectUseCase
from bug_tracker.application.use_cases.get_bug_by_id import GetBugByIdUseCase
from bug_tracker.application.use_cases.get_bugs import GetBugsUseCase
from bug_tracker.application.use_cases.identify_user import IdentifyUserUseCase
from bug_tracker.application.use_cases.list_projects import ListProjectsUseCase
from bug_tracker.application.use_cases.list_users import ListUsersUseCase
from bug_tracker.application.use_cases.report_bug import ReportBugUseCase
from bug_tracker.application.use_cases.transition_bug import TransitionBugUseCase
from bug_tracker.configuration.settings import Settings, build_settings


@dataclass(frozen=True)
class Container:
    settings: Settings
    state: TrackerState
    directory: DirectoryService
    project_service: ProjectService
    engine: BugWorkflowEngine
    identify_user_use_case: IdentifyUserUseCase
    list_users_use_case: ListUsersUseCase
    list_projects_use_case: ListProjectsUseCase
    create_project_use_case: CreateProjectUseCase
    get_bugs_use_case: GetBugsUseCase
    get_bug_by_id_use_case: GetBugByIdUseCase
    report_bug_use_case: ReportBugUseCase
    assign_bug_use_case: AssignBugUseCase
    transition_bug_use_case: TransitionBugUseCase
    close_bug_use_case: CloseBugUseCase
    comment_on_bug_use_case: CommentOnBugUseCase


def assemble_container(
    settings: Settings,
    store: SnapshotStorePort,
    seed_source: SeedDataPort,
    clock: Callable[[], datetime] = datetime.now,
) -> Container:
    """Wires services and use cases around the given store and seed source."""
    state = TrackerState.open(store, seed_source, clock=clock)
    directory = DirectoryService(state)
    project_service = ProjectService(state, directory)
    engine = BugWorkflowEngine(state, directory, clock=clock)

    return Container(
        settings=settings,
        state=state,
        directory=directory,
        project_service=project_service,
        engine=engine,
        identify_user_use_case=IdentifyUserUseCase(directory=directory),
        list_users_use_case=ListUsersUseCase(directory=directory),
        list_projects_use_case=ListProjectsUseCase(directory=directory),
        create_project_use_case=CreateProjectUseCase(
            project_service=project_service,
            directory=directory,
        ),
        get_bugs_use_case=GetBugsUseCase(engine=engine, directory=directory),
        get_bug_by_id_use_case=GetBugByIdUseCase(engine=engine, directory=directory),
        report_bug_use_case=ReportBugUseCase(engine=engine, directory=directory),
        assign_bug_use_case=AssignBugUseCase(engine=engine, directory=directory),
        transition_bug_use_case=TransitionBugUseCase(engine=engine, directory=directory),
        close_bug_use_case=CloseBugUseCase(engine=engine, directory=directory),
        comment_on_bug_use_case=CommentOnBugUseCase(engine=engine, directory=directory),
    )


@lru_cache(maxsize=1)
def build_container() -> Container:
    settings = build_settings()

    if settings.store_backend == "memory":
        store: SnapshotStorePort = InMemorySnapshotStore()
    else:
        store = JsonFileSnapshotStore(path=settings.data_file)

    seed_source = YamlSeedRepository(yaml_path=settings.seed_yaml_path)

    return assemble_container(settings, store, seed_source)


def clear_container() -> None:
    build_container.cache_clear()
