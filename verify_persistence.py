import time
import subprocess
import httpx
import sys
import os
import signal

BASE_URL = "http://127.0.0.1:8000"
API_PREFIX = "/v1"
ACTOR_HEADERS = {"X-Actor-Name": "persistence-check"}
MODEL_ID = "CM-PERSIST"

def wait_for_server(retries=10, delay=2):
    url = f"{BASE_URL}/health"
    print(f"Waiting for server at {url}...")
    for i in range(retries):
        try:
            resp = httpx.get(url)
            if resp.status_code == 200:
                print("✅ Server is up!")
                return True
        except httpx.ConnectError:
            pass
        time.sleep(delay)
    print("❌ Server failed to start.")
    return False

def start_server(env=None):
    return subprocess.Popen(
        [sys.executable, "-m", "uvicorn", "booking_settlement.app.main:app", "--host", "127.0.0.1", "--port", "8000"],
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        env=env,
    )

def run_verification():
    # 1. Start Server (First Run)
    print("\n--- [Step 1] Starting Server (Initial) ---")
    proc = start_server(env={**os.environ, "DB_ECHO": "True"})  # Enable echo to see SQL
    
    try:
        if not wait_for_server():
            server_logs = proc.communicate(timeout=2)
            print("Server Stdout:", server_logs[0].decode())
            print("Server Stderr:", server_logs[1].decode())
            raise RuntimeError("Server start failed")

        # 2. Create a commission model
        print("\n--- [Step 2] Creating Commission Model (Persistence Test) ---")
        payload = {
            "id": MODEL_ID,
            "name": {"en": "Persistence check"},
            "calculation_type": "Percentage",
            "charter_commission": "5",
            "creator_commission": "2",
            "web_service_commission": "1",
        }
        resp = httpx.post(f"{BASE_URL}{API_PREFIX}/admin/commission-models", json=payload, headers=ACTOR_HEADERS)
        
        if resp.status_code == 422 and "already exists" in resp.text:
            print("⚠️ Model already exists (persistence working from previous run?)")
        elif resp.status_code == 201:
            print("✅ Commission Model Created")
            print(resp.json())
        else:
            print(f"❌ Creation Failed: {resp.status_code} {resp.text}")
            raise RuntimeError("Commission model creation failed")

    finally:
        print("\n--- [Step 3] Stopping Server ---")
        proc.send_signal(signal.SIGTERM)
        proc.wait()
    
    time.sleep(2) # Wait for port release

    # 3. Restart Server
    print("\n--- [Step 4] Restarting Server (Verification) ---")
    proc2 = start_server()

    try:
        if not wait_for_server():
            raise RuntimeError("Server restart failed")

        print("\n--- [Step 5] Reading Commission Model (Post-Restart) ---")
        resp = httpx.get(f"{BASE_URL}{API_PREFIX}/admin/commission-models/{MODEL_ID}")
        if resp.status_code == 200:
            print("✅ Commission Model Persisted")
            print(resp.json())
        else:
            print(f"❌ Lookup Failed (Persistence Issue?): {resp.status_code} {resp.text}")
            raise RuntimeError("Commission model missing after restart")

    finally:
        print("\n--- [Step 6] Stopping Server ---")
        proc2.send_signal(signal.SIGTERM)
        proc2.wait()

if __name__ == "__main__":
    run_verification()
