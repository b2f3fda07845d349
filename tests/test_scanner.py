from env_scan import scan_files
from env_scan.scanner import iter_candidate_files


def _write(root, relative, text):
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def _project(root):
    _write(root, "src/app.ts", "const a = process.env.PORT;\nconst b = import.meta.env.VITE_API;\nprocess.env.PORT;\n")
    _write(root, "src/plain.js", "console.log('nothing to see');\n")
    _write(root, "schema.prisma", 'datasource db {\n  url = env("DATABASE_URL")\n}\n')
    _write(root, "node_modules/pkg/index.js", "process.env.NODE_ENV\n")
    _write(root, "dist/bundle.js", "process.env.BUILT\n")
    _write(root, "README.md", "Set process.env.DOCUMENTED before running.\n")


def test_scan_collects_per_file_first_seen(tmp_path):
    _project(tmp_path)

    report = scan_files(tmp_path)

    assert list(report.files) == ["schema.prisma", "src/app.ts"]
    assert report.files["src/app.ts"] == ["PORT", "VITE_API"]
    assert report.files["schema.prisma"] == ["DATABASE_URL"]
    assert report.files_scanned == 3
    assert report.all_env_vars == ["DATABASE_URL", "PORT", "VITE_API"]
    assert report.errors == []


def test_scan_is_deterministic(tmp_path):
    _project(tmp_path)
    assert scan_files(tmp_path).as_dict() == scan_files(tmp_path).as_dict()


def test_unreadable_file_is_skipped(tmp_path):
    _project(tmp_path)
    (tmp_path / "src" / "broken.js").write_bytes(b"process.env.\xff\xfeBAD\n")

    report = scan_files(tmp_path)

    assert "src/broken.js" not in report.files
    assert len(report.errors) == 1
    assert "src/broken.js" in report.errors[0]
    assert report.all_env_vars == ["DATABASE_URL", "PORT", "VITE_API"]


def test_custom_include_and_exclude(tmp_path):
    _project(tmp_path)

    docs = scan_files(tmp_path, include=["**/*.md"])
    assert docs.files == {"README.md": ["DOCUMENTED"]}

    everything = scan_files(tmp_path, include=["**/*.js"], exclude=[])
    assert everything.files == {
        "dist/bundle.js": ["BUILT"],
        "node_modules/pkg/index.js": ["NODE_ENV"],
    }


def test_env_files_are_candidates(tmp_path):
    _write(tmp_path, ".env.example", "PORT=3000\n")
    _write(tmp_path, "config/app.env", "URL=${env.BASE_URL}\n")

    names = [p.relative_to(tmp_path).as_posix() for p in iter_candidate_files(tmp_path)]

    assert "config/app.env" in names
    assert scan_files(tmp_path).files == {"config/app.env": ["BASE_URL"]}


def test_as_dict_shape(tmp_path):
    _project(tmp_path)
    data = scan_files(tmp_path).as_dict()
    assert data["env_vars"] == ["DATABASE_URL", "PORT", "VITE_API"]
    assert data["files_scanned"] == 3
    assert data["files"]["schema.prisma"] == ["DATABASE_URL"]
