from setuptools import setup, find_packages

setup(name='fdsock',
      version='0.1.0',
      description='BSD socket calls on plain integer handles, with validated arguments and native error codes',
      classifiers=[
          "Programming Language :: Python :: 3",
          "License :: OSI Approved :: MIT License",
          "Operating System :: POSIX",
          "Operating System :: Microsoft :: Windows",
      ],
      keywords='socket bsd network syscall',
      license='MIT',
      python_requires='>=3.7',
      install_requires=['cffi>=1.12'],
      extras_require={'test': ['pytest']},
      packages=find_packages(include=['fdsock', 'fdsock.*']),
)
