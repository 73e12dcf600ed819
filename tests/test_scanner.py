"""Tests for cache directory scanning."""

from aicache.classifier import UNKNOWN_DESCRIPTION, USER_DEFINED_DESCRIPTION
from aicache.config import Settings
from aicache.models import SafetyTier
from aicache.overrides import MemoryOverrideStore
from aicache.scanner import CACHE_ROOTS, expand_directory, is_visible, scan_all_caches, scan_root
from aicache.sizing import get_directory_size


def _build_claude(home, make_file):
    claude = home / ".claude"
    make_file(claude / "plugins" / "p.bin", 300)
    make_file(claude / "projects" / "x" / "state.json", 200)
    make_file(claude / "debug" / "log.txt", 100)
    make_file(claude / ".hidden" / "h.bin", 50)
    make_file(claude / "settings.json", 10)
    make_file(claude / ".DS_Store", 5)
    return claude


def _build_gemini(home, make_file):
    gemini = home / ".gemini"
    make_file(gemini / "antigravity" / "brain" / "a.bin", 10)
    make_file(gemini / "antigravity" / "browser_recordings" / "v.webm", 500)
    make_file(gemini / "antigravity-browser-profile" / "p.db", 70)
    make_file(gemini / "other" / "o.bin", 5)
    make_file(gemini / "settings.json", 1)
    return gemini


class TestVisibility:
    def test_hidden_excluded(self):
        assert not is_visible(".hidden")
        assert not is_visible(".DS_Store")

    def test_platform_noise_excluded(self):
        assert not is_visible("Thumbs.db")

    def test_regular_name(self):
        assert is_visible("debug")


class TestScanAllCaches:
    def test_no_roots(self, home):
        result = scan_all_caches(home=home, platform="linux")
        assert result.directories == []
        assert result.total_size == 0

    def test_claude_root(self, home, make_file):
        claude = _build_claude(home, make_file)

        result = scan_all_caches(home=home, platform="linux")

        assert len(result.directories) == 1
        root = result.directories[0]
        assert root.name == ".claude"
        assert root.path == str(claude)
        assert root.size == 665
        assert root.size == get_directory_size(claude)
        assert root.safety_tier == SafetyTier.CAUTION
        assert root.description == "Claude Code CLI data"
        assert result.total_size == 665

    def test_children_sorted_and_classified(self, home, make_file):
        _build_claude(home, make_file)

        root = scan_all_caches(home=home, platform="linux").directories[0]

        assert [c.name for c in root.children] == ["plugins", "projects", "debug"]
        assert [c.size for c in root.children] == [300, 200, 100]
        assert [c.safety_tier for c in root.children] == [
            SafetyTier.DANGER,
            SafetyTier.CAUTION,
            SafetyTier.SAFE,
        ]
        assert root.children[0].description == "Installed plugins - do not delete"

    def test_depth_one_children_not_expanded(self, home, make_file):
        _build_claude(home, make_file)
        root = scan_all_caches(home=home, platform="linux").directories[0]
        assert all(c.children is None for c in root.children)

    def test_deeper_expansion(self, home, make_file):
        _build_claude(home, make_file)

        root = scan_all_caches(Settings(max_depth=2), home=home, platform="linux").directories[0]

        projects = next(c for c in root.children if c.name == "projects")
        assert [g.name for g in projects.children] == ["x"]
        assert projects.children[0].size == 200
        assert root.size == 665

    def test_unknown_child_uses_default_tier(self, home, make_file):
        make_file(home / ".claude" / "mystery" / "m.bin", 1)

        default = scan_all_caches(home=home, platform="linux").directories[0].children[0]
        assert default.safety_tier == SafetyTier.CAUTION
        assert default.description == UNKNOWN_DESCRIPTION

        settings = Settings(default_safety_tier=SafetyTier.SAFE)
        custom = scan_all_caches(settings, home=home, platform="linux").directories[0].children[0]
        assert custom.safety_tier == SafetyTier.SAFE

    def test_child_override(self, home, make_file):
        claude = _build_claude(home, make_file)
        store = MemoryOverrideStore({str(claude / "plugins"): SafetyTier.SAFE})

        root = scan_all_caches(overrides=store, home=home, platform="linux").directories[0]

        plugins = root.children[0]
        assert plugins.safety_tier == SafetyTier.SAFE
        assert plugins.description == USER_DEFINED_DESCRIPTION
        assert plugins.is_custom
        assert not root.children[1].is_custom

    def test_root_override(self, home, make_file):
        claude = _build_claude(home, make_file)
        store = MemoryOverrideStore({str(claude): SafetyTier.DANGER})

        root = scan_all_caches(overrides=store, home=home, platform="linux").directories[0]

        assert root.safety_tier == SafetyTier.DANGER
        assert root.is_custom

    def test_gemini_root(self, home, make_file):
        gemini = _build_gemini(home, make_file)

        root = scan_all_caches(home=home, platform="linux").directories[0]

        assert root.name == ".gemini"
        assert root.description == "Gemini/Antigravity data"
        assert root.size == 586 == get_directory_size(gemini)
        assert [c.name for c in root.children] == [
            "browser_recordings",
            "antigravity-browser-profile",
            "brain",
        ]
        assert [c.safety_tier for c in root.children] == [
            SafetyTier.SAFE,
            SafetyTier.SAFE,
            SafetyTier.CAUTION,
        ]

    def test_gemini_without_antigravity(self, home, make_file):
        make_file(home / ".gemini" / "settings.json", 4)
        root = scan_all_caches(home=home, platform="linux").directories[0]
        assert root.size == 4
        assert root.children == []

    def test_darwin_only_root(self, home, make_file):
        make_file(home / "Library" / "Caches" / "claude-cli-nodejs" / "c.bin", 40)

        assert scan_all_caches(home=home, platform="linux").directories == []

        result = scan_all_caches(home=home, platform="darwin")
        assert len(result.directories) == 1
        node = result.directories[0]
        assert node.name == "claude-cli-nodejs"
        assert node.safety_tier == SafetyTier.SAFE
        assert node.size == 40
        assert node.children is None

    def test_root_order_and_total(self, home, make_file):
        _build_claude(home, make_file)
        _build_gemini(home, make_file)
        make_file(home / "Library" / "Caches" / "claude-cli-nodejs" / "c.bin", 40)

        result = scan_all_caches(home=home, platform="darwin")

        assert [d.name for d in result.directories] == [".claude", ".gemini", "claude-cli-nodejs"]
        assert result.total_size == 665 + 586 + 40

    def test_root_that_is_a_file_is_skipped(self, home, make_file):
        make_file(home / ".claude", 10)
        assert scan_all_caches(home=home, platform="linux").directories == []

    def test_scan_is_deterministic(self, home, make_file):
        _build_claude(home, make_file)
        _build_gemini(home, make_file)

        first = scan_all_caches(home=home, platform="linux")
        second = scan_all_caches(home=home, platform="linux")

        assert first == second

    def test_uses_os_home_by_default(self, home, make_file):
        _build_claude(home, make_file)
        result = scan_all_caches(platform="linux")
        assert [d.name for d in result.directories] == [".claude"]


class TestExpandDirectory:
    def test_equal_sizes_keep_name_order(self, tmp_path, make_file):
        make_file(tmp_path / "b" / "f.bin", 10)
        make_file(tmp_path / "a" / "f.bin", 10)
        make_file(tmp_path / "c" / "f.bin", 20)

        total, nodes = expand_directory(str(tmp_path), "Claude Code", 1, Settings())

        assert total == 40
        assert [n.name for n in nodes] == ["c", "a", "b"]

    def test_files_count_toward_total_only(self, tmp_path, make_file):
        make_file(tmp_path / "loose.bin", 15)
        total, nodes = expand_directory(str(tmp_path), "Claude Code", 1, Settings())
        assert total == 15
        assert nodes == []

    def test_unreadable_directory(self, tmp_path):
        total, nodes = expand_directory(str(tmp_path / "missing"), "Claude Code", 1, Settings())
        assert (total, nodes) == (0, [])


class TestScanRoot:
    def test_missing_root(self, home):
        assert scan_root(CACHE_ROOTS[0], home=home) is None

    def test_roots_catalog(self):
        assert [r.path for r in CACHE_ROOTS] == [
            "~/.claude",
            "~/.gemini",
            "~/Library/Caches/claude-cli-nodejs",
        ]
