from __future__ import annotations

from dataclasses import dataclass

TRUNK = "trunk"
ARCHIVE_SUFFIX = ".zip"


@dataclass(frozen=True)
class HostingService:
    archive_template: str
    trunk_ref: str
    # <host>/<owner>/<repo>; None when the host serves any depth
    repo_segments: int | None = None


_GENERIC_SERVICE = HostingService(archive_template="https://{name}/archive/{ref}.zip", trunk_ref="master")


HOSTING_SERVICES: dict[str, HostingService] = {
    "github.com": HostingService(
        archive_template="https://{name}/archive/{ref}.zip", trunk_ref="master", repo_segments=3
    ),
    "bitbucket.org": HostingService(
        archive_template="https://{name}/get/{ref}.zip", trunk_ref="default", repo_segments=3
    ),
}


def hosting_service_for(name: str) -> HostingService:
    host = name.split("/", 1)[0].lower()
    return HOSTING_SERVICES.get(host, _GENERIC_SERVICE)


@dataclass(frozen=True)
class PackageDescriptor:
    """A requestable unit of code: import path plus version.

    ``version`` is either :data:`TRUNK` or an explicit version kind such as
    ``tag``; ``version_id`` only matters for non-trunk versions.
    """

    name: str
    version: str = TRUNK
    version_id: str = ""

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("package name must not be empty")
        if not self.version:
            raise ValueError("package version must not be empty")
        if not self.is_trunk and not self.version_id:
            raise ValueError(f"version {self.version!r} requires a version id")

    @property
    def is_trunk(self) -> bool:
        return self.version == TRUNK

    @property
    def ref(self) -> str:
        if self.is_trunk:
            return hosting_service_for(self.name).trunk_ref
        return self.version_id

    def url(self) -> str:
        service = hosting_service_for(self.name)
        return service.archive_template.format(name=self.name, ref=self.ref)

    def file_name(self) -> str:
        if self.is_trunk:
            return f"{TRUNK}{ARCHIVE_SUFFIX}"
        return f"{self.version}_{self.version_id}{ARCHIVE_SUFFIX}"

    def name_segments(self) -> list[str]:
        return self.name.split("/")

    def install_segments(self) -> list[str]:
        segments = self.name_segments()
        if not self.is_trunk:
            segments[-1] = f"{segments[-1]}_{self.version}_{self.version_id}"
        return segments

    def __str__(self) -> str:
        if self.is_trunk:
            return self.name
        return f"{self.name}@{self.version}:{self.version_id}"
