"""
Local development launcher for the digital twin API and chat UI.
Equivalent to: `uvicorn main:app --reload --host 0.0.0.0 --port 8000`
"""

import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
