# src/svcwatch/backends/windows.py
"""Windows implementations driven through PowerShell cmdlets."""

import subprocess

import orjson

from . import (
    TASK_HAS_NOT_RUN,
    EventLogReader,
    ServiceController,
    ServiceStatus,
    TaskDefinition,
    TaskScheduler,
    TaskStatus,
)
from ..errors import BackendError
from ..shell import ps_quote, run_powershell

_STATUS_MAP = {
    "running": ServiceStatus.RUNNING,
    "stopped": ServiceStatus.STOPPED,
    "startpending": ServiceStatus.START_PENDING,
    "stoppending": ServiceStatus.STOP_PENDING,
    "paused": ServiceStatus.PAUSED,
}

# Service Control Manager events that mean "did not start in time":
# 7009 (timeout waiting to connect) and 7011 (timeout waiting for a transaction
# response) name the service in insertion string 1; 7000 (failed to start)
# names it in insertion string 0 and only counts with error 1053.
STARTUP_TIMEOUT_EVENT_IDS = (7000, 7009, 7011)
FAILED_TO_START_EVENT_ID = 7000
TIMEOUT_ERROR_CODE = 1053

SYSTEM_ACCOUNT = "NT AUTHORITY\\SYSTEM"
ISO_FORMAT = "yyyy-MM-ddTHH:mm:sszzz"


def _find_service(name: str) -> str:
    """
    PowerShell expression yielding the service called exactly `name`, or nothing.

    `Get-Service -Name` treats its argument as a wildcard pattern, so the
    lookup compares names literally instead.
    """
    return f"(Get-Service -ErrorAction SilentlyContinue | Where-Object Name -eq {ps_quote(name)})"


def _require_service(name: str) -> str:
    return (
        f"$svc = {_find_service(name)}\n"
        f"if (-not $svc) {{ throw {ps_quote(f'Service {name} was not found.')} }}\n"
    )


class WindowsServiceController(ServiceController):
    """Queries and restarts services through Get-Service / Restart-Service."""

    def is_installed(self, name: str) -> bool:
        result = run_powershell(
            f"if ({_find_service(name)}) {{ exit 0 }} else {{ exit 1 }}",
            check=False,
        )
        return result.returncode == 0

    def status(self, name: str) -> ServiceStatus:
        result = run_powershell(_require_service(name) + "$svc.Status.ToString()")
        return _STATUS_MAP.get(result.stdout.strip().lower(), ServiceStatus.UNKNOWN)

    def restart(self, name: str) -> None:
        run_powershell(
            _require_service(name) + "$svc | Restart-Service -Force -ErrorAction Stop"
        )


class WindowsEventLog(EventLogReader):
    """Searches the System event log for startup timeouts during the last boot."""

    def startup_timed_out_at_boot(self, name: str, window_minutes: int) -> bool:
        ids = ", ".join(str(i) for i in STARTUP_TIMEOUT_EVENT_IDS)
        script = (
            "$ErrorActionPreference = 'Stop'\n"
            + _require_service(name)
            + "$names = @($svc.Name, $svc.DisplayName)\n"
            "$boot = (Get-CimInstance -ClassName Win32_OperatingSystem).LastBootUpTime\n"
            "$filter = @{ LogName = 'System'; ProviderName = 'Service Control Manager'; "
            f"Id = {ids}; StartTime = $boot; EndTime = $boot.AddMinutes({int(window_minutes)}) }}\n"
            "$events = Get-WinEvent -FilterHashtable $filter -ErrorAction SilentlyContinue\n"
            "@($events | Where-Object {\n"
            "  $props = @($_.Properties | ForEach-Object { \"$($_.Value)\" })\n"
            f"  if ($_.Id -eq {FAILED_TO_START_EVENT_ID}) {{\n"
            f"    ($props[0] -in $names) -and ($props[1] -match '{TIMEOUT_ERROR_CODE}')\n"
            "  } else {\n"
            "    $props[1] -in $names\n"
            "  }\n"
            "}).Count"
        )
        output = run_powershell(script).stdout.strip()
        try:
            return int(output or 0) > 0
        except ValueError:
            raise BackendError(f"Unexpected event log query output: {output!r}")


class WindowsTaskScheduler(TaskScheduler):
    """Manages the periodic task through the ScheduledTasks module."""

    def register(self, task: TaskDefinition) -> None:
        executable, *arguments = task.command
        script = (
            "$ErrorActionPreference = 'Stop'\n"
            f"$action = New-ScheduledTaskAction -Execute {ps_quote(executable)} "
            f"-Argument {ps_quote(subprocess.list2cmdline(arguments))} "
            f"-WorkingDirectory {ps_quote(str(task.working_dir))}\n"
            "$trigger = New-ScheduledTaskTrigger -Once -At (Get-Date) "
            f"-RepetitionInterval (New-TimeSpan -Minutes {int(task.interval_minutes)})\n"
            f"$principal = New-ScheduledTaskPrincipal -UserId {ps_quote(SYSTEM_ACCOUNT)} "
            "-LogonType ServiceAccount -RunLevel Highest\n"
            "$settings = New-ScheduledTaskSettingsSet -AllowStartIfOnBatteries "
            "-DontStopIfGoingOnBatteries -MultipleInstances IgnoreNew\n"
            f"Register-ScheduledTask -TaskName {ps_quote(task.name)} "
            f"-Description {ps_quote(task.description)} "
            "-Action $action -Trigger $trigger -Principal $principal -Settings $settings | Out-Null"
        )
        run_powershell(script)

    def unregister(self, name: str) -> None:
        script = (
            "$ErrorActionPreference = 'Stop'\n"
            f"$task = Get-ScheduledTask -TaskName {ps_quote(name)} -ErrorAction SilentlyContinue\n"
            f"if ($task) {{ Unregister-ScheduledTask -TaskName {ps_quote(name)} -Confirm:$false }}\n"
            "exit 0"
        )
        run_powershell(script)

    def query(self, name: str) -> TaskStatus:
        script = (
            "$ErrorActionPreference = 'Stop'\n"
            f"$task = Get-ScheduledTask -TaskName {ps_quote(name)} -ErrorAction SilentlyContinue\n"
            "if (-not $task) { '{\"registered\": false}'; exit 0 }\n"
            "$info = $task | Get-ScheduledTaskInfo\n"
            # A task that never ran still reports a placeholder LastRunTime.
            f"$neverRun = $info.LastTaskResult -eq {TASK_HAS_NOT_RUN}\n"
            "[pscustomobject]@{\n"
            "  registered = $true\n"
            "  state = \"$($task.State)\"\n"
            f"  last_run_time = if ($info.LastRunTime -and -not $neverRun) {{ $info.LastRunTime.ToString('{ISO_FORMAT}') }} else {{ $null }}\n"
            "  last_result = [int64]$info.LastTaskResult\n"
            f"  next_run_time = if ($info.NextRunTime) {{ $info.NextRunTime.ToString('{ISO_FORMAT}') }} else {{ $null }}\n"
            "} | ConvertTo-Json -Compress"
        )
        output = run_powershell(script).stdout.strip()
        try:
            data = orjson.loads(output)
        except orjson.JSONDecodeError:
            raise BackendError(f"Unexpected scheduled task query output: {output!r}")
        return TaskStatus(name=name, **data)
