import nox


@nox.session
def tests(session):
    session.install("pytest")
    session.run("pip", "install", ".")
    session.run("pytest")
