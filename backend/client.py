# backend/client.py
import requests

API = "http://localhost:8000/api/v1"  # adjust if running on docker-compose

def check_health(http=requests, api=API):
    r = http.get(f"{api}/health")
    print("Health:", r.status_code, r.json())
    return r

def create_task(http=requests, api=API):
    payload = {
        "title": "  Finish FastAPI client  ",
        "description": "Write a simple requests-based client script",
    }
    r = http.post(f"{api}/tasks", json=payload)
    print("Create task:", r.status_code, r.json())
    return r

def list_tasks(http=requests, api=API, **params):
    r = http.get(f"{api}/tasks", params=params)
    print("List tasks:", r.status_code, r.json())
    return r

def update_task(task_id, http=requests, api=API):
    r = http.put(f"{api}/tasks/{task_id}", json={"description": None})
    print("Update task:", r.status_code, r.json())
    return r

def complete_task(task_id, http=requests, api=API):
    r = http.patch(f"{api}/tasks/{task_id}/complete")
    print("Complete task:", r.status_code, r.json())
    return r

def show_stats(http=requests, api=API):
    r = http.get(f"{api}/tasks/stats")
    print("Stats:", r.status_code, r.json())
    return r

def delete_task(task_id, http=requests, api=API):
    r = http.delete(f"{api}/tasks/{task_id}")
    print("Delete task:", r.status_code)
    return r

def run_all(http=requests, api=API):
    """Walk every endpoint once and return the responses in call order."""
    responses = [check_health(http, api)]
    created = create_task(http, api)
    responses.append(created)
    task_id = created.json()["id"]
    responses.append(list_tasks(http, api, completed="false", limit=10))
    responses.append(update_task(task_id, http, api))
    responses.append(complete_task(task_id, http, api))
    responses.append(show_stats(http, api))
    responses.append(delete_task(task_id, http, api))
    return responses

if __name__ == "__main__":
    print("--- Testing FastAPI backend ---")
    run_all()
