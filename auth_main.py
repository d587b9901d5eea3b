"""
SecureAuth - Interactive Menu

Main user interface for the credential manager.
Features:
- Login (masked password input)
- Register a new account with live password feedback
- Suggest a strong password
- Change the user store path
"""

import getpass
import os
import sys

from secureauth import policy
from secureauth.logging_config import configure_logging
from secureauth.registry import PersistenceError, UserRegistry
from secureauth.service import CredentialService, RegistrationError

DEFAULT_STORE_PATH = "users.txt"
LOG_LEVEL = "WARNING"
BAR_WIDTH = 50


def clear_screen():
    os.system("cls" if os.name == "nt" else "clear")


def pause():
    input("\nPress Enter to continue...")


def print_header(title):
    clear_screen()
    print("=" * 60)
    print(title.center(60))
    print("=" * 60 + "\n")


def strength_bar(strength):
    pos = BAR_WIDTH * strength // 100
    return f"[{'=' * pos}>{' ' * (BAR_WIDTH - pos)}] {strength} %"


def choose_store_path(current=None):
    default = current or DEFAULT_STORE_PATH
    print(f"User store path [{default}]: ", end="")
    return input().strip() or default


def open_service(store_path):
    try:
        return CredentialService(UserRegistry.load(store_path))
    except PersistenceError as e:
        print(f"\nERROR: {e}")
        pause()
        return None


def cmd_login(service):
    print_header("User Login")
    username = input("Username: ").strip()
    if not username:
        print("Username required")
        pause()
        return
    password = getpass.getpass("Password: ")
    print("Verifying...")
    result = service.authenticate(username, password)
    print(result.message)
    if result.matched:
        print(f"\nWelcome to your secure account, {username}!")
    pause()


def prompt_password(service):
    """Ask until the policy accepts a password; returns (password, confirmation)."""
    print(policy.REQUIREMENTS + "\n")
    while True:
        pw = getpass.getpass("Enter password: ")
        if not pw:
            print("Password cannot be empty")
            continue
        result = service.evaluate_password(pw)
        for message in result.messages():
            print(f"  - {message}")
        if not result.accepted:
            continue
        print("Valid password!")
        print(f"Password strength: {strength_bar(result.strength)}")
        label = policy.strength_label(result.strength)
        if label == "weak":
            print("Password could be stronger")
        elif label == "excellent":
            print("Excellent password!")
        return pw, getpass.getpass("Confirm password: ")


def cmd_register(service):
    print_header("New Account Registration")
    username = input("Username: ").strip()

    # Cheap checks first so the user isn't asked for a password in vain
    failure = None
    if not username:
        print("Username required")
    elif service.registry.exists(username):
        print("Username already taken")
    else:
        while True:
            password, confirmation = prompt_password(service)
            print("Securely hashing password...")
            failure = service.register(username, password, confirmation)
            if failure and failure.kind is RegistrationError.PASSWORD_MISMATCH:
                print(failure.message + "\n")
                continue
            break
        if failure is None:
            print("Account created successfully!")
        else:
            print(failure.message)
    pause()


def cmd_suggest():
    print_header("Suggest Password")
    try:
        length = int(input("Password length [16]: ").strip() or 16)
        pw = policy.suggest_password(length)
    except ValueError as e:
        print(f"ERROR: {e}")
    else:
        result = policy.evaluate(pw)
        print(f"\nSuggested: {pw}")
        print(f"Strength:  {strength_bar(result.strength)}")
    pause()


def print_menu(service, store_path):
    print_header("Secure Authentication System")
    print(f"Store: {store_path}")
    print(f"Registered users: {service.registered_user_count()}\n")
    print(" 1) Login")
    print(" 2) Register")
    print(" 3) Suggest password")
    print(" 4) Change store path")
    print(" 0) Exit")


def main():
    configure_logging(LOG_LEVEL)
    store_path = DEFAULT_STORE_PATH
    service = open_service(store_path)
    if service is None:
        return 1
    while True:
        print_menu(service, store_path)
        c = input("\n> ").strip()
        if c == '1':
            cmd_login(service)
        elif c == '2':
            cmd_register(service)
        elif c == '3':
            cmd_suggest()
        elif c == '4':
            new_path = choose_store_path(store_path)
            new_service = open_service(new_path)
            if new_service is not None:
                service, store_path = new_service, new_path
        elif c == '0':
            print("\nGoodbye!")
            return 0
        else:
            print("Invalid choice")
            pause()


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nExiting...")
        sys.exit(0)
