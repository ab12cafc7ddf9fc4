"""Tests for locating the package that owns a file."""

from dupcheck.locator import PackageLocator, find_root
from dupcheck.models import PackageIdentity


class TestPackageLocator:
    """Tests for PackageLocator.locate."""

    def test_locates_nearest_package(self, project):
        """Test resolving a deep file to its package."""
        root = project.package("node_modules/a", "a", "1.2.3")
        module = project.module("node_modules/a/lib/deep/index.js")

        identity = PackageLocator().locate(module.resource)

        assert identity == PackageIdentity(name="a", version="1.2.3", root_path=str(root))
        assert identity.spec == "a@1.2.3"

    def test_nested_install_wins_over_outer(self, project):
        """Test that a nested install is found before its parent package."""
        project.package("node_modules/x", "x", "1.0.0")
        project.package("node_modules/x/node_modules/a", "a", "2.0.0")
        module = project.module("node_modules/x/node_modules/a/index.js")

        identity = PackageLocator().locate(module.resource)

        assert (identity.name, identity.version) == ("a", "2.0.0")

    def test_anonymous_metadata_retries_upward(self, project):
        """Test that metadata without a name is skipped."""
        project.package("node_modules/date-fns", "date-fns", "2.0.0")
        project.write_metadata(project.root / "node_modules/date-fns/esm", {"sideEffects": False})
        module = project.module("node_modules/date-fns/esm/index.js")

        identity = PackageLocator().locate(module.resource)

        assert (identity.name, identity.version) == ("date-fns", "2.0.0")

    def test_empty_name_retries_upward(self, project):
        """Test that an empty name is treated as anonymous."""
        project.write_metadata(project.root / "packages/util", {"name": "", "version": "0.0.1"})
        module = project.module("packages/util/index.js")

        identity = PackageLocator().locate(module.resource)

        assert identity.name == "app"

    def test_anonymous_metadata_without_named_ancestor(self, tmp_path):
        """Test that anonymous metadata with nothing above gives None."""
        anonymous = tmp_path / "workspace"
        anonymous.mkdir()
        (anonymous / "package.json").write_text('{"private": true}')
        source = anonymous / "index.js"
        source.write_text("")

        assert PackageLocator().locate(str(source)) is None

    def test_no_metadata_found(self, tmp_path):
        """Test a path outside any package."""
        source = tmp_path / "loose" / "index.js"
        source.parent.mkdir()
        source.write_text("")

        assert PackageLocator().locate(str(source)) is None

    def test_invalid_json_is_not_found(self, project):
        """Test that unparseable metadata gives None."""
        project.write_metadata(project.root / "node_modules/broken", "{not json")
        module = project.module("node_modules/broken/index.js")

        assert PackageLocator().locate(module.resource) is None

    def test_non_object_metadata_is_not_found(self, project):
        """Test that non-object metadata gives None."""
        project.write_metadata(project.root / "node_modules/odd", "[1, 2]")
        module = project.module("node_modules/odd/index.js")

        assert PackageLocator().locate(module.resource) is None

    def test_missing_version(self, project):
        """Test that a missing version becomes an empty string."""
        project.write_metadata(project.root / "node_modules/nov", {"name": "nov"})
        module = project.module("node_modules/nov/index.js")

        assert PackageLocator().locate(module.resource).version == ""

    def test_directory_path(self, project):
        """Test locating a package directory itself."""
        root = project.package("node_modules/a", "a", "1.0.0")

        assert PackageLocator().locate(str(root)).name == "a"

    def test_metadata_is_cached_per_locator(self, project):
        """Test that metadata is cached per locator only."""
        root = project.package("node_modules/a", "a", "1.0.0")
        module = project.module("node_modules/a/index.js")
        locator = PackageLocator()

        assert locator.locate(module.resource).version == "1.0.0"
        project.package("node_modules/a", "a", "9.9.9")
        assert locator.locate(module.resource).version == "1.0.0"
        assert PackageLocator().locate(module.resource).version == "9.9.9"
        assert find_root(root / "index.js") == root
