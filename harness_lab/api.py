"""
FastAPI 接口模块 - 探针、元数据、指标、问候与混沌接口

接口函数均为同步 def，由服务器线程池并行执行；
共享状态通过 Depends(get_state) 注入，不使用模块级全局变量。
"""
import logging
from urllib.parse import unquote_plus

from fastapi import APIRouter, BackgroundTasks, Depends, FastAPI, Request
from fastapi.responses import HTMLResponse, PlainTextResponse
from pydantic import BaseModel

from .dashboard import DASHBOARD_HTML
from .greeting import generate_greeting
from .metrics import render_metrics
from .state import ServiceState, create_state

logger = logging.getLogger(__name__)

router = APIRouter()


class VersionInfo(BaseModel):
    """构建/运行时信息（字段名与仪表盘 JS 保持一致）"""
    service: str
    version: str
    gitSha: str
    podName: str
    instanceId: str
    uptimeSeconds: int
    mode: str


def query_param(query: str, key: str, default: str) -> str:
    """
    从原始查询串取参数（不解码）

    按 & 切分，每段只按第一个 = 切分；没有 = 的片段忽略，取第一个匹配的 key
    """
    if not query:
        return default

    for part in query.split("&"):
        k, sep, v = part.partition("=")
        if sep and k == key:
            return v
    return default


def query_param_decoded(query: str, key: str, default: str) -> str:
    """URL 解码后的查询参数（+ 转空格，支持 %XX）"""
    return unquote_plus(query_param(query, key, default))


def get_state(request: Request) -> ServiceState:
    return request.app.state.service


@router.get("/", response_class=HTMLResponse)
def dashboard():
    return HTMLResponse(DASHBOARD_HTML)


@router.get("/healthz", response_class=PlainTextResponse)
def healthz():
    """存活探针"""
    return PlainTextResponse("ok\n")


@router.get("/readyz", response_class=PlainTextResponse)
def readyz():
    """就绪探针"""
    return PlainTextResponse("ready\n")


@router.get("/version", response_model=VersionInfo)
def version(state: ServiceState = Depends(get_state)):
    identity = state.identity
    return VersionInfo(
        service=identity.service_name,
        version=identity.version,
        gitSha=identity.git_sha,
        podName=identity.pod_name,
        instanceId=identity.instance_id,
        uptimeSeconds=identity.uptime_seconds(),
        mode=state.mode.get().value,
    )


@router.get("/metrics", response_class=PlainTextResponse)
def metrics(state: ServiceState = Depends(get_state)):
    body = render_metrics(state.metrics.snapshot(), state.identity.uptime_seconds())
    return PlainTextResponse(body)


@router.get("/greet", response_class=PlainTextResponse)
def greet(request: Request, state: ServiceState = Depends(get_state)):
    """问候接口：name 解码，mode 原样使用，默认取当前全局模式"""
    query = request.url.query
    current_mode = state.mode.get()

    name = query_param_decoded(query, "name", "World")
    requested_mode = query_param(query, "mode", current_mode.value)
    visitor_number = state.metrics.next_visitor()

    body = generate_greeting(name, visitor_number, requested_mode, current_mode, state.identity)
    return PlainTextResponse(body)


@router.get("/chaos", response_class=PlainTextResponse)
def chaos(request: Request, background_tasks: BackgroundTasks, state: ServiceState = Depends(get_state)):
    """
    混沌接口

    crash 的退出线程作为后台任务在响应发送之后才启动，不阻塞响应本身
    """
    action = query_param(request.url.query, "action", "")
    logger.info(f"收到混沌指令: {action!r}")

    result = state.chaos.apply(action)
    if result.crash:
        background_tasks.add_task(state.crash_scheduler.schedule)

    return PlainTextResponse(result.message, status_code=result.status_code)


def create_app(state: ServiceState = None) -> FastAPI:
    """创建 FastAPI 应用；每个应用持有自己的 ServiceState"""
    if state is None:
        state = create_state()

    app = FastAPI(
        title="Harness CI Lab",
        description="容器编排演练服务 - 探针、指标与故障注入",
        version=state.identity.version,
        docs_url=None,
        redoc_url=None,
        openapi_url=None
    )
    app.state.service = state

    @app.middleware("http")
    async def record_request(request: Request, call_next):
        # 响应体生成后、发送前计数（/metrics 不包含自身这次请求），404 同样计入
        try:
            return await call_next(request)
        finally:
            request.app.state.service.metrics.record(request.url.path)

    app.include_router(router)
    return app
