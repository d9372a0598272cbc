"""
Tests for the install and query use cases, wired with mock adapters.
"""

import pytest

from depend.adapters.mock import MockProcessExecutor, MockVcsAdapter
from depend.core.models.request import InstallRequest
from depend.core.use_cases.install import install_package, resolve_package
from depend.core.use_cases.query import describe_package, list_versions


@pytest.fixture
def doxygen_vcs(doxygen_refs, sha):
    return MockVcsAdapter(
        refs=doxygen_refs,
        trees={sha(31): {"CMakeLists.txt": "project(doxygen)\n"}},
    )


@pytest.fixture
def nasm_vcs(nasm_refs, sha):
    return MockVcsAdapter(refs=nasm_refs, trees={sha(43): {"autogen.sh": "#!/bin/sh\n"}})


def _build_nasm(call):
    # Stand-in for `make`: drop the two binaries into the working tree.
    for name in ("nasm", "ndisasm"):
        with open(f"{call.cwd}/{name}", "w") as fh:
            fh.write(name)


class TestInstallPackage:
    def test_doxygen_end_to_end(self, catalog, doxygen_vcs, tmp_path, sha):
        executor = MockProcessExecutor()
        result = install_package(
            InstallRequest(package_name="doxygen", prefix=tmp_path, jobs=2),
            catalog=catalog,
            vcs=doxygen_vcs,
            executor=executor,
        )

        assert result.ok, result.error
        assert result.version == "1_9_8"
        assert result.working_tree.content_id == sha(31)
        assert (tmp_path / "src" / "CMakeLists.txt").exists()
        assert doxygen_vcs.operations == ["list", "init", "fetch", "checkout"]
        assert [c.program for c in executor.call_log] == ["cmake", "make", "make"]
        assert executor.call_log[1].args == ["-j", "2"]
        assert result.report.steps_run == 3

    def test_nasm_installs_binaries(self, catalog, nasm_vcs, tmp_path):
        executor = MockProcessExecutor()
        executor.set_side_effect(3, _build_nasm)
        result = install_package(
            InstallRequest(package_name="nasm", prefix=tmp_path, jobs=1),
            catalog=catalog,
            vcs=nasm_vcs,
            executor=executor,
        )

        assert result.ok, result.error
        assert result.version == "2.16"
        assert (tmp_path / "bin" / "nasm").read_text() == "nasm"
        assert (tmp_path / "bin" / "ndisasm").read_text() == "ndisasm"
        assert result.to_dict()["build"]["installed"] == [
            str(tmp_path / "bin" / "nasm"),
            str(tmp_path / "bin" / "ndisasm"),
        ]

    def test_dry_run_resolves_only(self, catalog, doxygen_vcs, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        executor = MockProcessExecutor()
        result = install_package(
            InstallRequest(package_name="doxygen", dry_run=True),
            catalog=catalog,
            vcs=doxygen_vcs,
            executor=executor,
        )

        assert result.ok
        assert result.version == "1_9_8"
        assert doxygen_vcs.operations == ["list"]
        assert executor.call_count == 0
        assert result.working_tree is None
        assert list(tmp_path.iterdir()) == []

    def test_dry_run_with_prefix_writes_nothing(self, catalog, doxygen_vcs, tmp_path):
        prefix = tmp_path / "prefix"
        result = install_package(
            InstallRequest(package_name="doxygen", prefix=prefix, dry_run=True),
            catalog=catalog,
            vcs=doxygen_vcs,
        )
        assert result.ok
        assert not prefix.exists()

    def test_dry_run_matches_full_install(self, catalog, doxygen_vcs, tmp_path):
        dry = install_package(
            InstallRequest(package_name="doxygen", dry_run=True), catalog=catalog, vcs=doxygen_vcs,
        )
        full = install_package(
            InstallRequest(package_name="doxygen", prefix=tmp_path),
            catalog=catalog,
            vcs=doxygen_vcs,
            executor=MockProcessExecutor(),
        )
        assert dry.resolved == full.resolved

    def test_unknown_package(self, catalog, doxygen_vcs):
        result = install_package(
            InstallRequest(package_name="llvm", dry_run=True), catalog=catalog, vcs=doxygen_vcs,
        )
        assert not result.ok
        assert result.error_code == "E_UNKNOWN_PACKAGE"
        assert doxygen_vcs.call_log == []

    def test_transport_failure(self, catalog, doxygen_vcs, tmp_path):
        doxygen_vcs.set_failure("list", error="Connection refused")
        result = install_package(
            InstallRequest(package_name="doxygen", prefix=tmp_path),
            catalog=catalog,
            vcs=doxygen_vcs,
            executor=MockProcessExecutor(),
        )
        assert result.error_code == "E_TRANSPORT"
        assert "Connection refused" in result.error
        assert not (tmp_path / "src").exists()

    def test_materialize_failure_skips_build(self, catalog, doxygen_vcs, tmp_path):
        doxygen_vcs.set_failure("fetch", error="couldn't find remote ref")
        executor = MockProcessExecutor()
        result = install_package(
            InstallRequest(package_name="doxygen", prefix=tmp_path),
            catalog=catalog,
            vcs=doxygen_vcs,
            executor=executor,
        )
        assert result.error_code == "E_MATERIALIZE"
        assert result.error_context["phase"] == "fetch"
        assert executor.call_count == 0

    def test_step_failure_keeps_partial_report(self, catalog, doxygen_vcs, tmp_path):
        executor = MockProcessExecutor()
        executor.set_exit_code(2, 2)
        result = install_package(
            InstallRequest(package_name="doxygen", prefix=tmp_path),
            catalog=catalog,
            vcs=doxygen_vcs,
            executor=executor,
        )
        assert result.error_code == "E_STEP_FAILED"
        assert result.error_context["step_index"] == "2"
        assert result.report.steps_run == 2
        assert executor.call_count == 2

        d = result.to_dict()
        assert d["status"] == "failed"
        assert d["error"]["code"] == "E_STEP_FAILED"
        assert d["resolved"]["version"] == "1_9_8"

    def test_missing_tool(self, catalog, nasm_vcs, tmp_path):
        executor = MockProcessExecutor(missing_programs=["autoconf"])
        result = install_package(
            InstallRequest(package_name="nasm", prefix=tmp_path),
            catalog=catalog,
            vcs=nasm_vcs,
            executor=executor,
        )
        assert result.error_code == "E_SPAWN"
        assert "autoconf" in result.error
        assert executor.call_count == 0

    def test_rerun_is_idempotent(self, catalog, doxygen_vcs, tmp_path, sha):
        request = InstallRequest(package_name="doxygen", prefix=tmp_path)
        first = install_package(request, catalog=catalog, vcs=doxygen_vcs, executor=MockProcessExecutor())
        second = install_package(request, catalog=catalog, vcs=doxygen_vcs, executor=MockProcessExecutor())
        assert first.ok and second.ok
        assert first.working_tree == second.working_tree
        assert sorted(p.name for p in (tmp_path / "src").iterdir()) == [".mockvcs", "CMakeLists.txt"]

    def test_resolve_package(self, doxygen_spec, doxygen_vcs):
        assert resolve_package(doxygen_spec, doxygen_vcs).display_name == "1_9_8"


class TestQueries:
    def test_list_versions(self, catalog, nasm_vcs):
        result = list_versions("nasm", catalog=catalog, vcs=nasm_vcs)
        assert [v.display_name for v in result.versions] == ["2.15.05", "2.16rc1", "2.16rc2", "2.16"]
        assert result.latest.display_name == "2.16"
        assert result.to_dict()["latest"] == "2.16"

    def test_list_versions_unknown(self, catalog, nasm_vcs):
        result = list_versions("nope", catalog=catalog, vcs=nasm_vcs)
        assert result.error_code == "E_UNKNOWN_PACKAGE"
        assert result.latest is None
        assert "versions" not in result.to_dict()

    def test_describe_package(self, nasm_spec):
        d = describe_package(nasm_spec)
        assert d["name"] == "nasm"
        assert d["grammar"] == "release_candidate"
        assert d["steps"] == 3
        assert d["artifacts"] == ["nasm", "ndisasm"]
        assert "perl" in d["requires"]
