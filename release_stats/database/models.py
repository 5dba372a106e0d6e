"""
Tortoise ORM Models

Defines database models for repositories, their releases and the flat
release statistics table.
"""

from tortoise import fields
from tortoise.models import Model


class Repository(Model):
    """
    Repository model, identified by its "owner/name" full name.
    """
    id = fields.IntField(primary_key=True)
    full_name = fields.CharField(max_length=255, unique=True)

    class Meta:
        table = "repositories"

    def __str__(self):
        return self.full_name


class Release(Model):
    """
    Release model holding the source fields of a canonical release record.

    Weekday, hour and version fields are not stored; they are derived again
    when records are loaded.
    """
    id = fields.IntField(primary_key=True)
    repo = fields.ForeignKeyField(
        "models.Repository",
        related_name="releases",
        on_delete=fields.CASCADE
    )
    release_id = fields.BigIntField()
    tag_name = fields.CharField(max_length=255)
    release_name = fields.CharField(max_length=255, null=True)
    body_snippet = fields.TextField(null=True)
    published_at = fields.DatetimeField()
    prerelease = fields.BooleanField(default=False)
    draft = fields.BooleanField(default=False)
    author_login = fields.CharField(max_length=255)
    author_id = fields.BigIntField(default=0)
    assets_count = fields.IntField(default=0)
    total_download_count = fields.BigIntField(default=0)
    html_url = fields.CharField(max_length=500, null=True)

    class Meta:
        table = "releases"
        unique_together = (("release_id", "repo"),)

    def __str__(self):
        return f"{self.repo_id} - {self.tag_name}"


class ReleaseStat(Model):
    """
    One row of the flat statistics table (stat type, period, value).
    """
    id = fields.IntField(primary_key=True)
    repo = fields.ForeignKeyField(
        "models.Repository",
        related_name="stats",
        on_delete=fields.CASCADE
    )
    stat_type = fields.CharField(max_length=50)
    period = fields.CharField(max_length=50)
    value = fields.IntField()

    class Meta:
        table = "release_stats"
        unique_together = (("repo", "stat_type", "period"),)

    def __str__(self):
        return f"{self.stat_type} {self.period}: {self.value}"
