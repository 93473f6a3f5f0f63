import pytest

from videohub.models.user import User, watch_history
from videohub.services.auth_service import AuthService

USERS_URL = "/api/v1/users"


def avatar_file(name="me.png"):
    return (name, b"\x89PNG\r\n", "image/png")


def register(client, username="alice", email="Alice@VideoHub.io", **extra_files):
    files = {"avatar": avatar_file()}
    files.update(extra_files)
    return client.post(
        f"{USERS_URL}/register",
        data={
            "fullName": "Alice Liddell",
            "email": email,
            "username": username,
            "password": "wonderland",
        },
        files=files,
    )


def set_cookies(response) -> str:
    return " ".join(response.headers.get_list("set-cookie"))


# Registration


def test_register_creates_user(client, db_session, media_store):
    response = register(client, coverImage=("cover.jpg", b"\xff\xd8", "image/jpeg"))

    assert response.status_code == 201
    body = response.json()
    assert body["statusCode"] == 201
    assert body["message"] == "User registered successfully"

    user = body["data"]
    assert user["username"] == "alice"
    assert user["email"] == "alice@videohub.io"
    assert user["fullName"] == "Alice Liddell"
    assert user["avatar"].startswith("https://media.test/images/")
    assert user["coverImage"].startswith("https://media.test/images/")
    assert "password" not in user and "passwordHash" not in user
    assert "refreshToken" not in user

    stored = db_session.query(User).one()
    assert stored.password_hash != "wonderland"
    assert AuthService.verify_password("wonderland", stored.password_hash)
    assert len(media_store.uploads) == 2


def test_register_requires_avatar(client, db_session, media_store):
    response = client.post(
        f"{USERS_URL}/register",
        data={
            "fullName": "Bob",
            "email": "bob@videohub.io",
            "username": "bob",
            "password": "pw",
        },
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Avatar file is required"
    assert db_session.query(User).count() == 0


def test_register_rejects_duplicate_username_or_email(client, db_session, make_user):
    make_user(username="alice")

    assert register(client).status_code == 409
    assert register(client, username="other", email="ALICE@videohub.io").status_code == 409


def test_register_rejects_invalid_email(client, db_session, media_store):
    response = register(client, email="not-an-email")

    assert response.status_code == 400
    assert media_store.uploads == []


# Sessions


def test_login_returns_tokens_and_sets_cookies(client, db_session, make_user):
    user = make_user(username="carol", password="s3cret")

    response = client.post(
        f"{USERS_URL}/login", json={"username": "Carol", "password": "s3cret"}
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["user"]["id"] == user.id
    assert data["accessToken"] and data["refreshToken"]

    cookies = set_cookies(response)
    assert "accessToken=" in cookies
    assert "refreshToken=" in cookies
    assert "HttpOnly" in cookies

    db_session.expire_all()
    assert db_session.query(User).filter(User.id == user.id).one().refresh_token == data["refreshToken"]


def test_login_by_email(client, db_session, make_user):
    make_user(username="dave", password="pw")

    response = client.post(
        f"{USERS_URL}/login", json={"email": "DAVE@videohub.io", "password": "pw"}
    )
    assert response.status_code == 200


@pytest.mark.parametrize(
    "payload, status_code",
    [
        ({"username": "erin", "password": "wrong"}, 401),
        ({"username": "nobody", "password": "pw"}, 404),
        ({"password": "pw"}, 400),
    ],
)
def test_login_failures(client, db_session, make_user, payload, status_code):
    make_user(username="erin", password="pw")

    response = client.post(f"{USERS_URL}/login", json=payload)

    assert response.status_code == status_code
    assert response.json()["success"] is False


def test_refresh_rotates_tokens(client, db_session, make_user):
    make_user(username="frank", password="pw")
    login = client.post(f"{USERS_URL}/login", json={"username": "frank", "password": "pw"})
    old_refresh = login.json()["data"]["refreshToken"]
    client.cookies.clear()

    response = client.post(
        f"{USERS_URL}/refresh-token", json={"refreshToken": old_refresh}
    )

    assert response.status_code == 200
    assert response.json()["message"] == "Access token refreshed"
    new_refresh = response.json()["data"]["refreshToken"]
    assert new_refresh != old_refresh
    client.cookies.clear()

    # The superseded token no longer works
    replay = client.post(f"{USERS_URL}/refresh-token", json={"refreshToken": old_refresh})
    assert replay.status_code == 401

    again = client.post(f"{USERS_URL}/refresh-token", json={"refreshToken": new_refresh})
    assert again.status_code == 200


def test_refresh_rejects_access_token(client, db_session, make_user):
    user = make_user()
    access = AuthService.create_access_token({"sub": user.id})

    response = client.post(f"{USERS_URL}/refresh-token", json={"refreshToken": access})
    assert response.status_code == 401


def test_refresh_without_token(client, db_session):
    response = client.post(f"{USERS_URL}/refresh-token")
    assert response.status_code == 401


def test_logout_clears_session(client, db_session, make_user, auth_headers):
    user = make_user(username="gina", password="pw")
    login = client.post(f"{USERS_URL}/login", json={"username": "gina", "password": "pw"})
    refresh = login.json()["data"]["refreshToken"]

    response = client.post(f"{USERS_URL}/logout", headers=auth_headers(user))

    assert response.status_code == 200
    assert response.json()["message"] == "User logged out"
    db_session.expire_all()
    assert db_session.query(User).filter(User.id == user.id).one().refresh_token is None

    client.cookies.clear()
    replay = client.post(f"{USERS_URL}/refresh-token", json={"refreshToken": refresh})
    assert replay.status_code == 401


# Account


def test_current_user(client, db_session, make_user, auth_headers):
    user = make_user(username="hank")

    response = client.get(f"{USERS_URL}/current-user", headers=auth_headers(user))

    assert response.status_code == 200
    assert response.json()["data"]["username"] == "hank"


def test_current_user_rejects_bad_token(client, db_session):
    response = client.get(
        f"{USERS_URL}/current-user", headers={"Authorization": "Bearer garbage"}
    )
    assert response.status_code == 401


def test_change_password(client, db_session, make_user, auth_headers):
    user = make_user(username="ivy", password="old-pw")

    wrong = client.post(
        f"{USERS_URL}/change-password",
        json={"oldPassword": "nope", "newPassword": "new-pw"},
        headers=auth_headers(user),
    )
    assert wrong.status_code == 400
    assert wrong.json()["message"] == "Invalid old password"

    response = client.post(
        f"{USERS_URL}/change-password",
        json={"oldPassword": "old-pw", "newPassword": "new-pw"},
        headers=auth_headers(user),
    )
    assert response.status_code == 200

    login = client.post(f"{USERS_URL}/login", json={"username": "ivy", "password": "new-pw"})
    assert login.status_code == 200


def test_update_account(client, db_session, make_user, auth_headers):
    user = make_user(username="jack")
    make_user(username="kate")

    taken = client.patch(
        f"{USERS_URL}/update-account",
        json={"fullName": "Jack", "email": "kate@videohub.io"},
        headers=auth_headers(user),
    )
    assert taken.status_code == 409

    response = client.patch(
        f"{USERS_URL}/update-account",
        json={"fullName": "Jack Sparrow", "email": "Jack.S@VideoHub.io"},
        headers=auth_headers(user),
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["fullName"] == "Jack Sparrow"
    assert data["email"] == "jack.s@videohub.io"


def test_update_avatar_deletes_previous_image(
    client, db_session, media_store, make_user, auth_headers
):
    user = make_user(username="lena")
    previous = user.avatar

    response = client.patch(
        f"{USERS_URL}/update-user-avatar",
        files={"avatar": avatar_file("new.png")},
        headers=auth_headers(user),
    )

    assert response.status_code == 200
    assert response.json()["data"]["avatar"] != previous
    assert media_store.deletes == [(previous, "image")]


def test_update_avatar_requires_file(client, db_session, media_store, make_user, auth_headers):
    user = make_user()

    response = client.patch(f"{USERS_URL}/update-user-avatar", headers=auth_headers(user))

    assert response.status_code == 400
    assert response.json()["message"] == "Avatar file is missing"
    assert media_store.deletes == []


def test_update_cover_image_without_previous(
    client, db_session, media_store, make_user, auth_headers
):
    user = make_user()

    response = client.patch(
        f"{USERS_URL}/update-user-coverImage",
        files={"coverImage": ("cover.jpg", b"\xff\xd8", "image/jpeg")},
        headers=auth_headers(user),
    )

    assert response.status_code == 200
    assert response.json()["data"]["coverImage"].startswith("https://media.test/images/")
    assert media_store.deletes == []


# Watch history


def test_watch_history_in_stored_order(
    client, db_session, make_user, make_video, auth_headers
):
    viewer = make_user()
    creator = make_user(full_name="Creator")
    first = make_video(creator.id, title="first")
    second = make_video(creator.id, title="second")
    third = make_video(creator.id, title="third")

    db_session.execute(
        watch_history.insert(),
        [
            {"user_id": viewer.id, "video_id": third.id, "position": 0},
            {"user_id": viewer.id, "video_id": first.id, "position": 1},
            {"user_id": viewer.id, "video_id": second.id, "position": 2},
        ],
    )
    db_session.commit()

    response = client.get(f"{USERS_URL}/history", headers=auth_headers(viewer))

    assert response.status_code == 200
    items = response.json()["data"]
    assert [item["title"] for item in items] == ["third", "first", "second"]
    assert items[0]["ownerProfile"]["fullName"] == "Creator"
    assert items[0]["ownerProfile"]["username"] == creator.username
    assert items[0]["owner"] == creator.id


def test_empty_watch_history(client, db_session, make_user, auth_headers):
    response = client.get(f"{USERS_URL}/history", headers=auth_headers(make_user()))

    assert response.status_code == 200
    assert response.json()["data"] == []


# Channel profile


def test_channel_profile_counts_published_videos(
    client, db_session, make_user, make_video, auth_headers
):
    creator = make_user(username="maya", full_name="Maya")
    make_video(creator.id, title="one")
    make_video(creator.id, title="two")
    make_video(creator.id, title="draft", is_published=False)
    make_video(make_user().id, title="not hers")

    response = client.get(f"{USERS_URL}/c/Maya", headers=auth_headers(make_user()))

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["username"] == "maya"
    assert data["fullName"] == "Maya"
    assert data["videosCount"] == 2
    assert "passwordHash" not in data


def test_channel_profile_without_videos(client, db_session, make_user, auth_headers):
    user = make_user(username="nina")

    response = client.get(f"{USERS_URL}/c/nina", headers=auth_headers(user))

    assert response.status_code == 200
    assert response.json()["data"]["videosCount"] == 0


def test_channel_profile_unknown_user(client, db_session, make_user, auth_headers):
    response = client.get(f"{USERS_URL}/c/ghost", headers=auth_headers(make_user()))

    assert response.status_code == 404
    assert response.json()["message"] == "channel does not exist"


def test_channel_profile_requires_authentication(client, db_session, make_user):
    make_user(username="oscar")
    assert client.get(f"{USERS_URL}/c/oscar").status_code == 401
