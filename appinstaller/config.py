"""Configuration loading and validation for the installer.

The installer is driven by a single YAML document describing the artifact to
download and the script templates written for every platform. Templates carry
literal ``%token%`` placeholders which are substituted at install time.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml


class ConfigError(Exception):
    """Raised when config loading or parsing fails.

    Provides detailed error messages including line numbers,
    column positions, and caret indicators for syntax errors.
    """
    pass


CONFIG_ENV_VAR = "APPINSTALLER_CONFIG"


@dataclass(frozen=True)
class ProjectConfig:
    name: str
    version: str = "1.0.0"
    author: str = ""


@dataclass(frozen=True)
class DownloadConfig:
    """Where the artifact lives and how to check it.

    An empty ``hash`` disables checksum verification.
    """
    link: str
    file_name: str
    hash: str = ""

    def __post_init__(self):
        if not self.link or not isinstance(self.link, str):
            raise ValueError("link must be a non-empty string")
        if not self.file_name or not isinstance(self.file_name, str):
            raise ValueError("file_name must be a non-empty string")


@dataclass(frozen=True)
class ScriptConfig:
    file_name: str
    content: str = ""


@dataclass(frozen=True)
class ExeConfig:
    file_name: str
    resource_path: str
    powershell: str = ""


@dataclass(frozen=True)
class MacAppConfig:
    file_name: str
    info_plist: str = ""
    script: str = ""


@dataclass(frozen=True)
class DefaultDirsConfig:
    install: str = ""
    start_menu: str = ""


@dataclass(frozen=True)
class IconsConfig:
    windows: str = "assets/icon.ico"
    linux: str = "assets/icon.png"
    macos: str = "assets/icon.icns"


@dataclass(frozen=True)
class InstallConfig:
    batch: ScriptConfig
    bash: ScriptConfig
    exe: ExeConfig
    linux_desktop: ScriptConfig
    macos_app: MacAppConfig
    default_dirs: DefaultDirsConfig = field(default_factory=DefaultDirsConfig)
    icons: IconsConfig = field(default_factory=IconsConfig)


@dataclass(frozen=True)
class UninstallConfig:
    batch: ScriptConfig
    bash: ScriptConfig
    zsh: ScriptConfig


@dataclass(frozen=True)
class InstallerConfig:
    """Root configuration consumed by the installation engine."""
    app_name: str
    download: DownloadConfig
    install: InstallConfig
    uninstall: UninstallConfig
    project: ProjectConfig | None = None
    language: str = "eng"
    debug: bool = False
    resources_dir: Path | None = None

    def __post_init__(self):
        if not self.app_name or not isinstance(self.app_name, str):
            raise ValueError("app_name must be a non-empty string")

    def get_resources_dir(self) -> Path:
        """Directory that bundled resources (icons, executables) are read from."""
        if self.resources_dir is not None:
            return Path(self.resources_dir)
        return get_packaged_data_dir()

    def resource(self, relative_path: str) -> Path:
        return self.get_resources_dir() / relative_path


def get_packaged_data_dir() -> Path:
    """Return path to the bundled data directory."""
    return Path(__file__).parent / "data"


def get_packaged_config_path() -> Path:
    """Return path to packaged default config (read-only fallback)."""
    return get_packaged_data_dir() / "config.yaml"


def resolve_config_path(explicit: Path | str | None = None) -> Path:
    """Return the config file to load.

    Priority:
    1. Explicit path (``--config`` option)
    2. APPINSTALLER_CONFIG environment variable (if set)
    3. Packaged default config
    """
    if explicit:
        return Path(explicit)
    if CONFIG_ENV_VAR in os.environ:
        return Path(os.environ[CONFIG_ENV_VAR])
    return get_packaged_config_path()


def _section(data: dict, key: str, path: str, required: bool = True) -> dict:
    full_path = f"{path}.{key}" if path else key
    if key not in data or data[key] is None:
        if required:
            raise ConfigError(f"Missing required section: {full_path}")
        return {}
    if not isinstance(data[key], dict):
        raise ConfigError(f"{full_path} must be a mapping, got {type(data[key]).__name__}")
    return data[key]


def _string(data: dict, key: str, path: str, default: str | None = None) -> str:
    full_path = f"{path}.{key}" if path else key
    value = data.get(key)
    if value is None:
        if default is None:
            raise ConfigError(f"{full_path} is required")
        return default
    if not isinstance(value, str):
        raise ConfigError(f"{full_path} must be a string, got {type(value).__name__}")
    return value


def _script(data: dict, key: str, path: str, default_name: str) -> ScriptConfig:
    section = _section(data, key, path, required=False)
    section_path = f"{path}.{key}"
    return ScriptConfig(
        file_name=_string(section, "file_name", section_path, default_name),
        content=_string(section, "content", section_path, ""),
    )


def validate_config(data: dict, base_dir: Path | None = None) -> InstallerConfig:
    """Validate and convert raw dict to InstallerConfig.

    Args:
        data: Raw dict from yaml.safe_load() containing config data
        base_dir: Directory a relative ``resources_dir`` is resolved against

    Returns:
        InstallerConfig object with validated sections

    Raises:
        ConfigError: If validation fails with clear field path errors
    """
    if not isinstance(data, dict):
        raise ConfigError(f"Config must be a mapping, got {type(data).__name__}")

    app_name = _string(data, "app_name", "")
    language = _string(data, "language", "", "eng")
    debug = data.get("debug", False)
    if not isinstance(debug, bool):
        raise ConfigError(f"debug must be a boolean, got {type(debug).__name__}")

    project = None
    if data.get("project") is not None:
        project_data = _section(data, "project", "")
        project = ProjectConfig(
            name=_string(project_data, "name", "project", app_name),
            version=str(project_data.get("version", "1.0.0")),
            author=_string(project_data, "author", "project", ""),
        )

    download_data = _section(data, "download", "")
    sha256 = download_data.get("sha256")
    if sha256 is not None and not isinstance(sha256, str):
        raise ConfigError(f"download.sha256 must be a string, got {type(sha256).__name__}")
    try:
        download = DownloadConfig(
            link=_string(download_data, "link", "download"),
            file_name=_string(download_data, "file_name", "download", "client.jar"),
            hash=(sha256 or "").strip().lower(),
        )
    except ValueError as e:
        raise ConfigError(f"download: {e}")

    install_data = _section(data, "install", "")
    dirs_data = _section(install_data, "default_dirs", "install", required=False)
    exe_data = _section(install_data, "exe", "install", required=False)
    mac_data = _section(install_data, "macos_app", "install", required=False)
    icons_data = _section(install_data, "icons", "install", required=False)
    defaults = IconsConfig()
    install = InstallConfig(
        batch=_script(install_data, "batch", "install", "start.bat"),
        bash=_script(install_data, "bash", "install", "start.sh"),
        exe=ExeConfig(
            file_name=_string(exe_data, "file_name", "install.exe", "start.exe"),
            resource_path=_string(exe_data, "resource_path", "install.exe", ""),
            powershell=_string(exe_data, "powershell", "install.exe", ""),
        ),
        linux_desktop=_script(install_data, "linux_desktop", "install", "start.desktop"),
        macos_app=MacAppConfig(
            file_name=_string(mac_data, "file_name", "install.macos_app", "start.app"),
            info_plist=_string(mac_data, "info_plist", "install.macos_app", ""),
            script=_string(mac_data, "script", "install.macos_app", ""),
        ),
        default_dirs=DefaultDirsConfig(
            install=_string(dirs_data, "install", "install.default_dirs", ""),
            start_menu=_string(dirs_data, "start_menu", "install.default_dirs", ""),
        ),
        icons=IconsConfig(
            windows=_string(icons_data, "windows", "install.icons", defaults.windows),
            linux=_string(icons_data, "linux", "install.icons", defaults.linux),
            macos=_string(icons_data, "macos", "install.icons", defaults.macos),
        ),
    )

    uninstall_data = _section(data, "uninstall", "")
    uninstall = UninstallConfig(
        batch=_script(uninstall_data, "batch", "uninstall", "uninstall.bat"),
        bash=_script(uninstall_data, "bash", "uninstall", "uninstall.sh"),
        zsh=_script(uninstall_data, "zsh", "uninstall", "uninstall.app"),
    )

    resources_dir = None
    raw_resources = data.get("resources_dir")
    if raw_resources is not None:
        if not isinstance(raw_resources, str):
            raise ConfigError(
                f"resources_dir must be a string, got {type(raw_resources).__name__}"
            )
        resources_dir = Path(raw_resources).expanduser()
        if not resources_dir.is_absolute() and base_dir is not None:
            resources_dir = base_dir / resources_dir

    try:
        return InstallerConfig(
            app_name=app_name,
            download=download,
            install=install,
            uninstall=uninstall,
            project=project,
            language=language,
            debug=debug,
            resources_dir=resources_dir,
        )
    except ValueError as e:
        raise ConfigError(str(e))


def _format_syntax_error(original_text: str, error: yaml.MarkedYAMLError) -> str:
    """Format a YAML syntax error with line, caret, and context.

    Args:
        original_text: The original text that failed to parse
        error: The MarkedYAMLError raised by yaml.safe_load()

    Returns:
        A formatted error message string
    """
    mark = error.problem_mark
    problem = error.problem or "invalid YAML"
    if mark is None:
        return f"Config syntax error: {problem}"

    lines = original_text.split("\n")
    line_num = mark.line + 1
    col_num = mark.column + 1

    msg_parts = [f"Config syntax error at line {line_num}, col {col_num}: {problem}"]
    if 1 <= line_num <= len(lines):
        msg_parts.append(lines[line_num - 1])
        msg_parts.append(" " * (col_num - 1) + "^")

    return "\n".join(msg_parts)


def load_config(path_or_text: Path | str) -> dict:
    """Load and parse a YAML config document.

    Args:
        path_or_text: Either a Path to a YAML file, or a string containing YAML

    Returns:
        A dict containing the parsed config data

    Raises:
        ConfigError: If the file cannot be read or contains syntax errors.
        TypeError: If path_or_text is neither Path nor str.
    """
    if isinstance(path_or_text, Path):
        file_path = path_or_text
        try:
            original_text = file_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise ConfigError(f"Config file not found: {file_path}")
        except PermissionError:
            raise ConfigError(f"Permission denied reading config file: {file_path}")
        except UnicodeDecodeError:
            raise ConfigError(f"Config file is not valid UTF-8: {file_path}")
        except IOError as e:
            raise ConfigError(f"Error reading config file {file_path}: {e}")
    elif isinstance(path_or_text, str):
        original_text = path_or_text
    else:
        raise TypeError(f"path_or_text must be Path or str, got {type(path_or_text).__name__}")

    try:
        result = yaml.safe_load(original_text)
    except yaml.MarkedYAMLError as e:
        raise ConfigError(_format_syntax_error(original_text, e)) from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Config syntax error: {e}") from e

    if not isinstance(result, dict):
        raise ConfigError(f"Config must be a mapping, got {type(result).__name__}")

    return result


def load_installer_config(path: Path | str | None = None) -> InstallerConfig:
    """Resolve, load and validate the installer configuration."""
    config_path = resolve_config_path(path)
    data = load_config(config_path)
    return validate_config(data, base_dir=config_path.parent)


__all__ = [
    "ConfigError",
    "ProjectConfig",
    "DownloadConfig",
    "ScriptConfig",
    "ExeConfig",
    "MacAppConfig",
    "DefaultDirsConfig",
    "IconsConfig",
    "InstallConfig",
    "UninstallConfig",
    "InstallerConfig",
    "get_packaged_data_dir",
    "get_packaged_config_path",
    "resolve_config_path",
    "validate_config",
    "load_config",
    "load_installer_config",
]
