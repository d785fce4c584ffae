#!/usr/bin/env python3
"""Startup script for container deployment."""
import os
import uvicorn

if __name__ == "__main__":
    port = int(os.environ.get("PORT", 3000))
    print(f"Starting SchoolPay API on port {port}")
    uvicorn.run(
        "schoolpay.main:app",
        host="0.0.0.0",
        port=port,
        log_level="info"
    )
