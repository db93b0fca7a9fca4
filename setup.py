from setuptools import setup, find_packages

with open("requirements.txt") as f:
    install_requires = f.read().strip().split("\n")

setup(
    name="salvus_relief",
    version="0.1.0",
    description="Disaster relief platform: campaigns, vetted beneficiaries and capped vendor redemption",
    author="Salvus Relief",
    author_email="admin@salvusrelief.org",
    packages=find_packages(),
    zip_safe=False,
    include_package_data=True,
    install_requires=install_requires,
)
