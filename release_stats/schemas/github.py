"""
Type Definitions and Interfaces

Defines TypedDict classes for GitHub API release payloads
similar to TypeScript interfaces.
"""

from typing import TypedDict, List, Optional


class GitHubUser(TypedDict, total=False):
    """GitHub user reference (release author)"""
    login: str
    id: int


class GitHubReleaseAsset(TypedDict, total=False):
    """GitHub release asset"""
    id: int
    name: str
    download_count: int


class GitHubRelease(TypedDict, total=False):
    """GitHub release information as returned by /repos/{owner}/{repo}/releases"""
    id: int
    tag_name: str
    name: Optional[str]
    body: Optional[str]
    draft: bool
    prerelease: bool
    created_at: Optional[str]
    published_at: Optional[str]
    author: GitHubUser
    assets: List[GitHubReleaseAsset]
    html_url: Optional[str]


class ReleaseRow(TypedDict):
    """One row of the exported release table (CSV header names)"""
    Repository: str
    ReleaseId: str
    TagName: str
    ReleaseName: str
    PublishedAt: str
    PublishedAtKST: str
    IsPreRelease: str
    IsDraft: str
    AuthorLogin: str
    AuthorId: str
    BodySnippet: str
    AssetsCount: str
    TotalDownloadCount: str
    ReleaseUrl: str
    Weekday: str
    HourOfDay: str
    IsWeekend: str
    MajorVersion: str
    MinorVersion: str
    PatchVersion: str
    ReleaseType: str
