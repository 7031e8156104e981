"""ECR repositories and images controller."""

from __future__ import annotations

import enum

from awstui_core.collectors.registry import RegistryCollector
from awstui_core.commands import DEFAULT_SETTLE_SECONDS, Command, command, mutation
from awstui_core.controllers import READY, DomainController, ListView
from awstui_core.formatting import format_timestamp, join_values
from awstui_core.models import (
    ActionCompleted,
    ActionKind,
    Domain,
    ListFetched,
    PendingAction,
    ResourceItem,
    ResourceKind,
)

UNTAGGED = "<untagged>"


class RegistryState(enum.Enum):
    REPOSITORY_LIST = "RepositoryList"
    IMAGE_LIST = "ImageList"


def repository_item(repository: dict) -> ResourceItem:
    name = repository.get("repositoryName", "")
    return ResourceItem(
        title=name,
        description=f"URI: {repository.get('repositoryUri', '')} | Created: {format_timestamp(repository.get('createdAt'))}",
        filter_value=name,
        resource=repository,
    )


def image_item(image: dict) -> ResourceItem:
    tags = join_values(image.get("imageTags")) or UNTAGGED
    size_mb = int(image.get("imageSizeInBytes", 0)) / (1024 * 1024)
    return ResourceItem(
        title=tags,
        description=(
            f"Digest: {image.get('imageDigest', '')} | Pushed: {format_timestamp(image.get('imagePushedAt'))} | "
            f"Size: {size_mb:.1f} MB"
        ),
        filter_value=f"{tags} {image.get('imageDigest', '')}",
        resource=image,
    )


class RegistryController(DomainController):
    domain = Domain.REGISTRY
    ROOT = RegistryState.REPOSITORY_LIST
    PARENTS = {RegistryState.REPOSITORY_LIST: None, RegistryState.IMAGE_LIST: RegistryState.REPOSITORY_LIST}
    LIST_STATES = frozenset({RegistryState.REPOSITORY_LIST, RegistryState.IMAGE_LIST})

    def __init__(self, collector: RegistryCollector, settle_seconds: float = DEFAULT_SETTLE_SECONDS):
        self.collector = collector
        self.repositories = ListView("ECR Repositories", "No ECR repositories found in this region.")
        self.images = ListView("Images", "No ECR images found in this repository.")
        self.repository: dict | None = None
        super().__init__(settle_seconds)

    def load(self) -> list[Command]:
        self.status = "Loading repositories..."
        return [self._fetch_repositories()]

    def leave(self, state) -> None:
        if state is RegistryState.REPOSITORY_LIST:
            self.repositories.clear()
        elif state is RegistryState.IMAGE_LIST:
            self.images.clear()
            self.repository = None

    def active_list(self) -> ListView | None:
        if self.state is RegistryState.IMAGE_LIST:
            return self.images
        return self.repositories

    def all_lists(self) -> list[ListView]:
        return [self.repositories, self.images]

    @property
    def repository_name(self) -> str:
        return (self.repository or {}).get("repositoryName", "")

    # commands

    def _fetch_repositories(self) -> Command:
        collector = self.collector
        return command("fetch repositories", lambda: ListFetched(ResourceKind.REPOSITORIES, collector.list_repositories()))

    def _fetch_images(self) -> Command:
        collector, name = self.collector, self.repository_name
        return command(f"fetch images {name}", lambda: ListFetched(ResourceKind.IMAGES, collector.list_images(name)))

    def action_factories(self):
        collector, settle = self.collector, self.settle_seconds

        def pull(action: PendingAction) -> Command:
            uri = action.payload["repository_uri"]
            return mutation(f"pull {uri}:{action.target_id}", lambda: collector.pull(uri, action.target_id), "pulled", action.target_id, settle)

        def push(action: PendingAction) -> Command:
            uri = action.payload["repository_uri"]
            return mutation(f"push {uri}:{action.target_id}", lambda: collector.push(uri, action.target_id), "pushed", action.target_id, settle)

        return {ActionKind.PULL: pull, ActionKind.PUSH: push}

    # input

    def on_key(self, key: str):
        if self.state is RegistryState.REPOSITORY_LIST:
            if key == "r":
                self.status = "Refreshing ECR repositories..."
                return [self._fetch_repositories()]
            if key == "enter":
                selected = self.repositories.selected()
                if selected is None:
                    return []
                self.repository = selected.resource
                self.images.clear()
                self.state = RegistryState.IMAGE_LIST
                self.status = f"Loading images for repository {self.repository_name}..."
                return [self._fetch_images()]
            return None

        if key == "r":
            self.status = f"Refreshing images for repository {self.repository_name}..."
            return [self._fetch_images()]
        if key not in {"p", "u"}:
            return None
        selected = self.images.selected()
        if selected is None:
            return []
        tags = selected.resource.get("imageTags") or []
        if not tags:
            self.status = "Selected image has no tag. Cannot pull or push."
            return []
        kind, verb = (ActionKind.PULL, "pulling") if key == "p" else (ActionKind.PUSH, "pushing")
        return self.begin_action(
            kind,
            tags[0],
            f"Confirm {verb} image {tags[0]}? (y/N)",
            repository_uri=(self.repository or {}).get("repositoryUri", ""),
        )

    # results

    def on_result(self, result) -> list[Command]:
        if isinstance(result, ListFetched):
            if result.kind is ResourceKind.REPOSITORIES:
                self.repositories.set_items(repository_item(r) for r in result.items)
            elif result.kind is ResourceKind.IMAGES:
                self.images.set_items(image_item(i) for i in result.items)
            self.status = READY
        elif isinstance(result, ActionCompleted):
            if self.repository is None:
                self.status = f"Image {result.target_id} {result.label}."
                return []
            self.status = f"Image {result.target_id} {result.label}. Refreshing..."
            return [self._fetch_images()]
        return []

    def breadcrumb(self) -> list[str]:
        crumbs = [self.domain.value]
        if self.state is RegistryState.IMAGE_LIST:
            crumbs += [self.repository_name, "Images"]
        return crumbs
