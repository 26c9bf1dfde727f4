def register(client, email, password="secret123", **profile):
    body = {"email": email, "password": password, "name": "Test User", "phone": "0912345678", "birthday": "1990-01-01"}
    body.update(profile)
    return client.post("/register", json=body)


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}
