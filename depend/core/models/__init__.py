"""
Domain models — Pydantic types and small value objects.

All models are re-exported here for convenient access:

    from depend.core.models import PackageSpec, RemoteRef, InstallRequest
"""

from depend.core.models.package import ArtifactCopy, BuildStep, PackageSpec
from depend.core.models.receipt import ProcessReceipt
from depend.core.models.refs import RemoteRef, ResolvedVersion, WorkingTree
from depend.core.models.request import InstallLayout, InstallRequest

__all__ = [
    # package.py
    "ArtifactCopy",
    "BuildStep",
    "PackageSpec",
    # request.py
    "InstallLayout",
    "InstallRequest",
    # receipt.py
    "ProcessReceipt",
    # refs.py
    "RemoteRef",
    "ResolvedVersion",
    "WorkingTree",
]
