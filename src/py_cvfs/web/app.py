"""Flask front end for CVFS.

``create_app`` boots a kernel and publishes its system calls as a small
JSON API.  Each route is one syscall; an ``ErrorCode`` result becomes
``{"error": <name>, "code": <value>}`` with the HTTP status listed in
``_HTTP_STATUS``:

    GET    /api/status              SYS_SYSINFO + SYS_LIST_FDS
    GET    /api/files               SYS_LIST_FILES
    POST   /api/files               SYS_CREATE_FILE   {"name", "permission"}
    GET    /api/files/<name>        SYS_STAT
    DELETE /api/files/<name>        SYS_UNLINK
    GET    /api/fds/<fd>            SYS_FSTAT
    POST   /api/fds/<fd>/write      SYS_WRITE_FILE    {"data"}
    POST   /api/fds/<fd>/read       SYS_READ_FILE     {"count"}

``POST /api/execute`` runs one shell command line for the terminal on
``GET /``.  Once the kernel halts, every syscall route answers 503.
"""

from __future__ import annotations

from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, render_template, request

from py_cvfs.fs.errors import ErrorCode
from py_cvfs.fs.filesystem import FsLimits
from py_cvfs.kernel import Kernel, KernelState
from py_cvfs.shell import Shell
from py_cvfs.syscalls import SyscallNumber, is_error

_HTTP_STATUS: dict[ErrorCode, HTTPStatus] = {
    ErrorCode.INVALID_PARAMETER: HTTPStatus.BAD_REQUEST,
    ErrorCode.NO_FREE_INODES: HTTPStatus.INSUFFICIENT_STORAGE,
    ErrorCode.FILE_ALREADY_EXISTS: HTTPStatus.CONFLICT,
    ErrorCode.FILE_NOT_EXIST: HTTPStatus.NOT_FOUND,
    ErrorCode.PERMISSION_DENIED: HTTPStatus.FORBIDDEN,
    ErrorCode.INSUFFICIENT_SPACE: HTTPStatus.INSUFFICIENT_STORAGE,
    ErrorCode.INSUFFICIENT_DATA: HTTPStatus.REQUESTED_RANGE_NOT_SATISFIABLE,
    ErrorCode.MAX_FILES_OPEN: HTTPStatus.INSUFFICIENT_STORAGE,
}


class ApiError(Exception):
    """A request that ends in a JSON error body instead of a result."""

    def __init__(self, status: HTTPStatus, payload: dict[str, Any]) -> None:
        """Store the HTTP status and the JSON body to send."""
        super().__init__(payload.get("error"))
        self.status = status
        self.payload = payload

    @classmethod
    def from_code(cls, code: ErrorCode) -> ApiError:
        """Build the error for a failed syscall."""
        return cls(_HTTP_STATUS[code], {"error": code.name, "code": int(code)})


def _json_body(*fields: str) -> dict[str, Any]:
    """Return the request's JSON object, requiring ``fields``.

    Raises:
        ApiError: 400 if the body is not a JSON object or a field is missing.

    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ApiError(HTTPStatus.BAD_REQUEST, {"error": "Expected a JSON object"})
    for field in fields:
        if field not in data:
            raise ApiError(HTTPStatus.BAD_REQUEST, {"error": f"Missing '{field}' field"})
    return data


def create_app(*, limits: FsLimits | None = None) -> Flask:
    """Create the Flask application around a freshly booted kernel.

    Args:
        limits: File-system capacities for the kernel; defaults apply
            when omitted.

    Returns:
        A configured Flask application ready to serve.

    """
    kernel = Kernel(limits=limits)
    kernel.boot()
    shell = Shell(kernel=kernel)
    boot_log = "\n".join(kernel.dmesg())

    app = Flask(__name__)

    def syscall(number: SyscallNumber, **kwargs: Any) -> Any:
        if kernel.state is not KernelState.RUNNING:
            raise ApiError(HTTPStatus.SERVICE_UNAVAILABLE, {"error": "System halted"})
        result = kernel.syscall(number, **kwargs)
        if is_error(result):
            raise ApiError.from_code(result)
        return result

    @app.errorhandler(ApiError)
    def api_error(error: ApiError) -> tuple[Response, int]:  # pyright: ignore[reportUnusedFunction]
        return jsonify(error.payload), error.status

    @app.route("/")
    def index() -> str:  # pyright: ignore[reportUnusedFunction]
        """Render the terminal page with the boot log."""
        return render_template("index.html", boot_log=boot_log)

    @app.get("/api/status")
    def status() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Report super block counters and the open descriptors."""
        if kernel.state is not KernelState.RUNNING:
            return jsonify({"running": False})
        return jsonify(
            {
                "running": True,
                "sysinfo": syscall(SyscallNumber.SYS_SYSINFO),
                "fds": syscall(SyscallNumber.SYS_LIST_FDS),
            }
        )

    @app.get("/api/files")
    def list_files() -> Response:  # pyright: ignore[reportUnusedFunction]
        return jsonify(syscall(SyscallNumber.SYS_LIST_FILES))

    @app.post("/api/files")
    def create_file() -> tuple[Response, int]:  # pyright: ignore[reportUnusedFunction]
        """Create a file; the new descriptor comes back with 201."""
        body = _json_body("name", "permission")
        fd = syscall(
            SyscallNumber.SYS_CREATE_FILE, name=body["name"], permission=body["permission"]
        )
        return jsonify({"fd": fd, "name": body["name"]}), HTTPStatus.CREATED

    @app.get("/api/files/<name>")
    def stat_file(name: str) -> Response:  # pyright: ignore[reportUnusedFunction]
        return jsonify(syscall(SyscallNumber.SYS_STAT, name=name))

    @app.delete("/api/files/<name>")
    def unlink_file(name: str) -> tuple[str, int]:  # pyright: ignore[reportUnusedFunction]
        syscall(SyscallNumber.SYS_UNLINK, name=name)
        return "", HTTPStatus.NO_CONTENT

    @app.get("/api/fds/<int:fd>")
    def fstat(fd: int) -> Response:  # pyright: ignore[reportUnusedFunction]
        return jsonify(syscall(SyscallNumber.SYS_FSTAT, fd=fd))

    @app.post("/api/fds/<int:fd>/write")
    def write(fd: int) -> Response:  # pyright: ignore[reportUnusedFunction]
        """Append the text in ``data``; the byte count comes back."""
        body = _json_body("data")
        if not isinstance(body["data"], str):
            raise ApiError.from_code(ErrorCode.INVALID_PARAMETER)
        written = syscall(SyscallNumber.SYS_WRITE_FILE, fd=fd, data=body["data"])
        return jsonify({"fd": fd, "written": written})

    @app.post("/api/fds/<int:fd>/read")
    def read(fd: int) -> Response:  # pyright: ignore[reportUnusedFunction]
        """Read ``count`` bytes; zero fill is stripped from the text."""
        body = _json_body("count")
        data: bytes = syscall(SyscallNumber.SYS_READ_FILE, fd=fd, count=body["count"])
        return jsonify(
            {
                "fd": fd,
                "count": len(data),
                "data": data.rstrip(b"\x00").decode(errors="replace"),
            }
        )

    @app.post("/api/execute")
    def execute() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Run one shell command line for the terminal page."""
        body = _json_body("command")
        if kernel.state is not KernelState.RUNNING:
            return jsonify({"output": "System halted.", "halted": True})
        result = shell.execute(str(body["command"]))
        if result == Shell.EXIT_SENTINEL:
            return jsonify({"output": "Thank you for using CVFS", "halted": True})
        return jsonify({"output": result, "halted": False})

    return app


def main() -> None:
    """Serve the web UI on localhost (the ``cvfs-web`` entry point)."""
    create_app().run(debug=True, port=8080)
