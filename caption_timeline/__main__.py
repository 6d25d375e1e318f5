"""Package entry point for ``python -m caption_timeline``.

WHY: Users build a caption timeline as ``python -m caption_timeline clip.mp4``,
or start the HTTP API with ``python -m caption_timeline --serve``.

RULES:
- ``--serve`` starts the FastAPI app under uvicorn
- Without ``--serve``, falls through to the CLI
"""

import sys

if __name__ == "__main__":
    if "--serve" in sys.argv:
        from caption_timeline.server.app import run_api
        run_api()
    else:
        from caption_timeline.cli import main
        main()
