# osm_route/app/build.py
from collections.abc import Mapping
from dataclasses import dataclass

from osm_route.app.session import MapSession
from osm_route.config.models import RouterModel
from osm_route.io.recorder import JsonlSink, Recorder, Sink
from osm_route.io.router_logging import RouterLogging  # JSON logs
from osm_route.runtime.hooks import NoopHooks, SessionHooks


@dataclass
class App:
    config: RouterModel
    session: MapSession
    hooks: SessionHooks
    recorder: Recorder | None


def build(
    cfg: RouterModel | Mapping | None = None,
    *,
    use_logging: bool = True,
    sinks: list[Sink] | None = None,
) -> App:
    # 0) Validate config
    if cfg is None:
        model = RouterModel()
    else:
        model = cfg if isinstance(cfg, RouterModel) else RouterModel.model_validate(cfg)

    # 1) Hooks (logging + recorder for analytics events)
    recorder = None
    if use_logging:
        recorder = Recorder(*(sinks if sinks is not None else [JsonlSink()]))
        hooks = RouterLogging(
            run_id=model.run_id,
            recorder=recorder,
            level=model.log.level,
            debug=model.log.debug,
            sample_every=model.log.sample_every,
        )
    else:
        hooks = NoopHooks()

    # 2) Session
    session = MapSession(model, hooks=hooks)
    return App(model, session, hooks, recorder)
