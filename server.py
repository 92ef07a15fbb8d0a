# Development server for the cookie session application.
# Reads options from session.yml when present; otherwise set COOKIE_SESSION_SECRET.
from pathlib import Path
from cookie_session.main import create_app, Config

_cfg_path = Path('session.yml')
app = create_app(Config(config_path=_cfg_path if _cfg_path.exists() else None))
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
